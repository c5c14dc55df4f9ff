"""HelpDesk - tickets de suporte roteados por departamento."""

__version__ = "0.1.0"
