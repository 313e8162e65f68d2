"""Domain layer for famfin application.

Services are imported from their modules (``famfin.domain.transaction`` and
so on); this package stays import-free so the storage layer can use the
entities without pulling in the services.
"""
