"""
===============================================================================
APPLICATION LAYER
===============================================================================

Casos de uso del back-office, organizados por feature en `usecases/`.

Nota:
  - Importar desde los subpaquetes (app.application.usecases.session, ...).
===============================================================================
"""
