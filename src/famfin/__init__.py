"""famfin: family finance tracker with credit-card invoice reconciliation."""

__version__ = "0.1.0"


def __getattr__(name):
    # The CLI pulls in click and the services; load it only on demand
    if name == "main":
        from famfin.cli.main import main
        return main
    raise AttributeError(f"module 'famfin' has no attribute '{name}'")
