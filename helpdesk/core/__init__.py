"""
Core Domain Layer - O Hexágono.

Lógica de negócio do HelpDesk sem dependências de frameworks:
- accounts: papéis, departamentos e política de autorização
- tickets: ciclo de vida, taxonomia, consultas e estatísticas

Nenhum módulo deste pacote importa Django, Celery ou boto3.
"""
