"""
Django Forms para validação de entrada da API.

Forms são DRIVING ADAPTERS que validam dados antes de
passar para os Use Cases.

Responsabilidades:
- Validação estrutural (tamanho máximo dos campos de texto)
- Leitura dos arquivos do multipart como AttachmentUploadDTO
- Normalização de flags (myTickets)

Princípios:
- Forms NÃO contêm lógica de negócio
- Campos obrigatórios, enums e taxonomia são validados no Use Case,
  que reporta todos os campos ausentes de uma vez; por isso os
  campos aqui são required=False
"""

from typing import List

from django import forms

from helpdesk.core.shared.exceptions import ValidationError
from helpdesk.core.tickets.dtos import (
    AttachmentUploadDTO,
    CreateTicketInputDTO,
    TicketQueryDTO,
)

TRUE_VALUES = ('true', '1', 'yes', 'on')

# Assunto bruto; o prefixo "[categoria - subcategoria] " ainda é somado
# antes de gravar na coluna de 500 caracteres
SUBJECT_MAX_LENGTH = 300
TAXONOMY_MAX_LENGTH = 100
SEARCH_MAX_LENGTH = 200


def parse_flag(value) -> bool:
    """Interpreta flags de query string ("true", "1", ...)."""
    return str(value or '').strip().lower() in TRUE_VALUES


class APIForm(forms.Form):
    """Form base: erros de validação viram ValidationError do domínio."""

    def validate(self) -> None:
        """
        Executa is_valid() e reporta o primeiro campo inválido.

        Raises:
            ValidationError: Com `field` apontando o campo rejeitado
        """
        if self.is_valid():
            return
        field, messages = next(iter(self.errors.items()))
        raise ValidationError(f"{field}: {messages[0]}", field=field)


class TicketCreateForm(APIForm):
    """
    Form para criação de ticket (multipart/form-data).

    Todo arquivo do multipart é anexado, qualquer que seja o nome do
    campo ("files[]", "files", "attachments", ...), na ordem enviada.
    """

    subject = forms.CharField(required=False, strip=False, max_length=SUBJECT_MAX_LENGTH)
    description = forms.CharField(required=False, strip=False)
    department = forms.CharField(required=False, max_length=10)
    priority = forms.CharField(required=False, max_length=10)
    category = forms.CharField(required=False, max_length=TAXONOMY_MAX_LENGTH)
    subcategory = forms.CharField(required=False, max_length=TAXONOMY_MAX_LENGTH)

    def uploaded_attachments(self) -> List[AttachmentUploadDTO]:
        """Lê os arquivos enviados, na ordem do multipart."""
        return [
            AttachmentUploadDTO(
                filename=uploaded.name,
                content=uploaded.read(),
                content_type=uploaded.content_type or 'application/octet-stream',
            )
            for _, uploads in self.files.lists()
            for uploaded in uploads
        ]

    def to_dto(self) -> CreateTicketInputDTO:
        """
        Converte para DTO do Core.

        Note:
            Deve ser chamado após validate().
        """
        data = self.cleaned_data
        return CreateTicketInputDTO(
            subject=data.get('subject') or '',
            description=data.get('description') or '',
            department=data.get('department') or '',
            priority=data.get('priority') or '',
            category=data.get('category') or '',
            subcategory=data.get('subcategory') or '',
            attachments=tuple(self.uploaded_attachments()),
        )


class TicketFilterForm(APIForm):
    """
    Form para filtros de listagem.

    Valores vazios são ignorados; valores fora dos enums são
    rejeitados pelo Use Case.
    """

    department = forms.CharField(required=False, max_length=10)
    priority = forms.CharField(required=False, max_length=10)
    status = forms.CharField(required=False, max_length=20)
    search = forms.CharField(required=False, max_length=SEARCH_MAX_LENGTH)
    myTickets = forms.CharField(required=False)

    def to_dto(self) -> TicketQueryDTO:
        data = self.cleaned_data
        return TicketQueryDTO(
            my_tickets=parse_flag(data.get('myTickets')),
            department=data.get('department') or None,
            priority=data.get('priority') or None,
            status=data.get('status') or None,
            search=data.get('search') or None,
        )
