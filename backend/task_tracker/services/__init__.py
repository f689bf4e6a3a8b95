# backend/task_tracker/services/__init__.py
from .mailer import SMTPTransport, TransportError, get_mail_transport
from .notifications import evaluate_and_notify, sweep_for_account, sweep_all_due

__all__ = [
    "SMTPTransport", "TransportError", "get_mail_transport",
    "evaluate_and_notify", "sweep_for_account", "sweep_all_due"
]
