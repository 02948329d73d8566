"""
Domain event publishing.

Workflow side effects (contract sales for new campaigns, execution status
driven by purchase requests, notifications) are declared as named signals in
the app that owns the state change and consumed by receivers in the app that
owns the reaction. Publishing never fails the primary operation: receiver
errors are collected by send_robust() and logged here.
"""
import logging

logger = logging.getLogger(__name__)


def publish(event, sender, **payload):
    """
    Send a domain event to every receiver.

    Args:
        event: django.dispatch.Signal instance
        sender: model class or object publishing the event
        **payload: event arguments passed to receivers

    Returns:
        list of (receiver, result) pairs, results being return values or
        the exception a receiver raised
    """
    results = event.send_robust(sender=sender, **payload)
    for receiver, result in results:
        if isinstance(result, Exception):
            logger.error(
                f"Event receiver {getattr(receiver, '__qualname__', receiver)} failed "
                f"for {sender.__name__ if isinstance(sender, type) else sender}: {result}",
                exc_info=(type(result), result, result.__traceback__),
            )
    return results
