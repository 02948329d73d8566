"""
Purchasing domain events.
"""
from django.dispatch import Signal

# Arguments: request, old_status, new_status, actor
purchase_request_reviewed = Signal()
