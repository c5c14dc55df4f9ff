"""
Taxonomia de Tickets: Departamento → Categoria → Subcategorias.

Tabela estática usada para popular os seletores da interface e,
opcionalmente, validar a classificação de um ticket.

Modos de validação:
- Leniente (padrão): valores fora da tabela são aceitos e apenas
  registrados em log. Tickets antigos com categorias removidas
  continuam editáveis.
- Estrito: valores fora da tabela geram ValidationError.

Example:
    >>> subcategories_for(Department.FINANCE, "Payroll")
    ['Salary Slip', 'Salary Discrepancy', 'Tax Deduction', 'Bank Account Update']
"""

import logging
from typing import Dict, List, Tuple

from helpdesk.core.accounts.entities import Department
from helpdesk.core.shared.exceptions import ValidationError

logger = logging.getLogger(__name__)


DEPARTMENT_STRUCTURE: Dict[Department, Dict[str, List[str]]] = {
    Department.ADMIN: {
        "Facilities": [
            "Office Maintenance",
            "Cleaning",
            "Parking",
            "Seating Request",
        ],
        "IT Assets": [
            "Laptop Request",
            "Hardware Issue",
            "Software Access",
            "Email Account",
        ],
        "Travel": [
            "Flight Booking",
            "Hotel Booking",
            "Visa Support",
        ],
    },
    Department.FINANCE: {
        "Payroll": [
            "Salary Slip",
            "Salary Discrepancy",
            "Tax Deduction",
            "Bank Account Update",
        ],
        "Reimbursement": [
            "Travel Expenses",
            "Medical Expenses",
            "Internet Allowance",
        ],
        "Taxation": [
            "Form 16",
            "Investment Declaration",
            "Tax Certificate",
        ],
    },
    Department.HR: {
        "Leave": [
            "Leave Balance",
            "Leave Approval",
            "Holiday Calendar",
        ],
        "Onboarding": [
            "Joining Documents",
            "Induction",
            "ID Card",
        ],
        "Policies": [
            "Code of Conduct",
            "Work From Home",
            "Benefits",
        ],
        "Employee Records": [
            "Personal Details Update",
            "Experience Letter",
            "Address Change",
        ],
    },
}


def categories_for(department: Department) -> List[str]:
    """Categorias do departamento, na ordem de exibição."""
    return list(DEPARTMENT_STRUCTURE.get(department, {}).keys())


def subcategories_for(department: Department, category: str) -> List[str]:
    """Subcategorias de (departamento, categoria); lista vazia se desconhecida."""
    return list(DEPARTMENT_STRUCTURE.get(department, {}).get(category, []))


def is_valid(department: Department, category: str, subcategory: str) -> bool:
    """
    Verifica se a classificação pertence à tabela.

    Categoria e subcategoria vazias são válidas (campos opcionais).
    Subcategoria sem categoria não é.
    """
    if not category:
        return not subcategory
    if category not in DEPARTMENT_STRUCTURE.get(department, {}):
        return False
    if not subcategory:
        return True
    return subcategory in subcategories_for(department, category)


def resolve(
    department: Department,
    category: str,
    subcategory: str,
    strict: bool = False,
) -> Tuple[str, str]:
    """
    Normaliza e valida categoria/subcategoria para o departamento.

    Args:
        department: Departamento do ticket
        category: Categoria informada (pode ser vazia)
        subcategory: Subcategoria informada (pode ser vazia)
        strict: Se True, rejeita valores fora da tabela

    Returns:
        Tupla (category, subcategory) sem espaços nas bordas

    Raises:
        ValidationError: Apenas no modo estrito
    """
    category = (category or "").strip()
    subcategory = (subcategory or "").strip()

    if is_valid(department, category, subcategory):
        return category, subcategory

    field = "category"
    if category in DEPARTMENT_STRUCTURE.get(department, {}):
        field = "subcategory"

    if strict:
        raise ValidationError(
            f"Invalid {field} for department {department.value}: "
            f"{category!r} / {subcategory!r}",
            field=field,
        )

    logger.warning(
        f"Classificação fora da taxonomia aceita em modo leniente: "
        f"{department.value} / {category!r} / {subcategory!r}"
    )
    return category, subcategory


def as_dict() -> Dict[str, Dict[str, List[str]]]:
    """Tabela completa serializável, indexada pelo valor do departamento."""
    return {
        department.value: {
            category: list(subcategories)
            for category, subcategories in categories.items()
        }
        for department, categories in DEPARTMENT_STRUCTURE.items()
    }
