"""
============================================================
TARJETA CRC — infrastructure/__init__.py
============================================================
Module: infrastructure (adapters)

Responsibilities:
  - Agrupar adapters concretos: Postgres, Redis, servicio de auth gestionado.

Policy:
  - Sin side effects al importar (el pool y los clientes se crean en el container).
============================================================
"""
