"""
Mensagens de email das notificações de tickets.

- Ticket criado: para a caixa do departamento, com cópias (CC_EMAILS)
- Status alterado: para o dono do ticket, se o username for um email

As mensagens têm corpo texto e alternativa HTML. Endereços, remetente
e URL base vêm das settings:
    DEPARTMENT_EMAILS, CC_EMAILS, DEFAULT_FROM_EMAIL, APP_BASE_URL
"""

from typing import List, Optional

from django.conf import settings
from django.core.mail import EmailMultiAlternatives
from django.utils import timezone
from django.utils.html import escape, format_html, linebreaks

from helpdesk.core.accounts.entities import UserEntity
from helpdesk.core.tickets.entities import TicketEntity, TicketPriority, TicketStatus


def _base_url() -> str:
    return getattr(settings, 'APP_BASE_URL', 'http://localhost:8000').rstrip('/')


def _from_email() -> str:
    return getattr(settings, 'DEFAULT_FROM_EMAIL', 'noreply@company.com')


def department_mailbox(department_value: str) -> Optional[str]:
    """Caixa de email do departamento (None se não configurada)."""
    mailboxes = getattr(settings, 'DEPARTMENT_EMAILS', {}) or {}
    return mailboxes.get(department_value) or None


def cc_recipients() -> List[str]:
    return [address for address in getattr(settings, 'CC_EMAILS', []) if address]


def _format_timestamp(value) -> str:
    if timezone.is_aware(value):
        value = timezone.localtime(value)
    return value.strftime('%A, %B %d, %Y %H:%M %Z').strip()


def _creator_line(creator: Optional[UserEntity]) -> str:
    if creator is None:
        return 'Unknown user'
    return f"{creator.name} ({creator.role.value})"


# =============================================================================
# Ticket criado
# =============================================================================

def ticket_created_subject(ticket: TicketEntity) -> str:
    prefix = '[URGENT] ' if ticket.priority is TicketPriority.HIGH else ''
    return f"{prefix}New Ticket #{ticket.id}: {ticket.subject}"


def ticket_created_text(ticket: TicketEntity, creator: Optional[UserEntity]) -> str:
    lines = [
        'NEW SUPPORT TICKET CREATED',
        '',
        f"Ticket #{ticket.id}",
        f"Subject: {ticket.subject}",
        f"Priority: {ticket.priority.label}",
        f"Department: {ticket.department.label}",
        f"Status: {ticket.status.label}",
        f"Created By: {_creator_line(creator)}",
        f"Created At: {_format_timestamp(ticket.created_at)}",
    ]
    if ticket.category:
        lines.append(f"Category: {ticket.category}")
    if ticket.subcategory:
        lines.append(f"Subcategory: {ticket.subcategory}")
    lines += ['', 'Description:', ticket.description, '']
    if ticket.priority is TicketPriority.HIGH:
        lines += ['HIGH PRIORITY TICKET - Requires immediate attention!', '']
    lines += [
        'Please log in to the HelpDesk system to view and manage this ticket:',
        f"{_base_url()}/login",
        '',
        '---',
        f"HelpDesk System | {ticket.department.label} Department",
        'This is an automated notification.',
    ]
    return '\n'.join(lines)


def ticket_created_html(ticket: TicketEntity, creator: Optional[UserEntity]) -> str:
    rows = [
        ('Subject', ticket.subject),
        ('Priority', ticket.priority.label),
        ('Department', ticket.department.label),
        ('Status', ticket.status.label),
        ('Created By', _creator_line(creator)),
        ('Created At', _format_timestamp(ticket.created_at)),
    ]
    if ticket.category:
        rows.append(('Category', ticket.category))
    if ticket.subcategory:
        rows.append(('Subcategory', ticket.subcategory))

    rows_html = ''.join(
        format_html('<tr><th align="left">{}:</th><td>{}</td></tr>', label, value)
        for label, value in rows
    )
    urgent_html = ''
    if ticket.priority is TicketPriority.HIGH:
        urgent_html = (
            '<p style="color: #dc2626; font-weight: bold;">HIGH PRIORITY TICKET</p>'
            '<p>This ticket requires immediate attention due to its high priority status.</p>'
        )

    return (
        '<html><body>'
        '<h1>New Support Ticket Created</h1>'
        '<p>A new support ticket has been submitted to your department</p>'
        + format_html('<h2>Ticket #{}</h2>', ticket.id)
        + f'<table>{rows_html}</table>'
        + '<h3>Description:</h3>'
        + f'<div>{linebreaks(escape(ticket.description))}</div>'
        + urgent_html
        + format_html('<p><a href="{}/login">View Ticket in Dashboard</a></p>', _base_url())
        + format_html(
            '<p>HelpDesk System | {} Department<br>'
            'This is an automated notification. Please do not reply to this email.</p>',
            ticket.department.label,
        )
        + '</body></html>'
    )


def build_ticket_created_email(
    ticket: TicketEntity,
    creator: Optional[UserEntity],
    to_address: str,
) -> EmailMultiAlternatives:
    """Monta o email de novo ticket para a caixa do departamento."""
    message = EmailMultiAlternatives(
        subject=ticket_created_subject(ticket),
        body=ticket_created_text(ticket, creator),
        from_email=_from_email(),
        to=[to_address],
        cc=cc_recipients(),
    )
    message.attach_alternative(ticket_created_html(ticket, creator), 'text/html')
    return message


# =============================================================================
# Status alterado
# =============================================================================

def ticket_status_subject(ticket: TicketEntity, new_status: TicketStatus) -> str:
    return f"Ticket #{ticket.id} Status Updated: {new_status.value}"


def ticket_status_text(
    ticket: TicketEntity,
    old_status: TicketStatus,
    new_status: TicketStatus,
    comment: Optional[str] = None,
) -> str:
    lines = [
        'Ticket Status Update',
        '',
        f"Your ticket #{ticket.id} status has been updated.",
        f"Subject: {ticket.subject}",
        f"Status: {old_status.value} → {new_status.value}",
    ]
    if comment:
        lines.append(f"Comment: {comment}")
    lines += ['', f"View your ticket: {_base_url()}/my-tickets"]
    return '\n'.join(lines)


def ticket_status_html(
    ticket: TicketEntity,
    old_status: TicketStatus,
    new_status: TicketStatus,
    comment: Optional[str] = None,
) -> str:
    comment_html = ''
    if comment:
        comment_html = format_html('<p><strong>Comment:</strong> {}</p>', comment)
    return (
        '<h2>Ticket Status Update</h2>'
        + format_html('<p>Your ticket #{} status has been updated.</p>', ticket.id)
        + format_html('<p><strong>Subject:</strong> {}</p>', ticket.subject)
        + format_html(
            '<p><strong>Status:</strong> {} &rarr; {}</p>',
            old_status.value,
            new_status.value,
        )
        + comment_html
        + format_html(
            '<p>View your ticket: <a href="{}/my-tickets">My Tickets</a></p>',
            _base_url(),
        )
    )


def build_ticket_status_email(
    ticket: TicketEntity,
    to_address: str,
    old_status: TicketStatus,
    new_status: TicketStatus,
    comment: Optional[str] = None,
) -> EmailMultiAlternatives:
    """Monta o email de mudança de status para o dono do ticket."""
    message = EmailMultiAlternatives(
        subject=ticket_status_subject(ticket, new_status),
        body=ticket_status_text(ticket, old_status, new_status, comment),
        from_email=_from_email(),
        to=[to_address],
    )
    message.attach_alternative(
        ticket_status_html(ticket, old_status, new_status, comment),
        'text/html',
    )
    return message
