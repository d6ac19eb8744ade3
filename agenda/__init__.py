# agenda/__init__.py
"""Núcleo de disponibilidade e reserva de horários (turnos) das lojas."""

__version__ = "0.1.0"
