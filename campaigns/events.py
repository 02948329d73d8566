"""
Campaign domain events.

Published through api.events.publish(); receivers live in the apps that
react (sales, notifications).
"""
from django.dispatch import Signal

# Arguments: campaign, actor
campaign_created = Signal()

# Arguments: post, actor
post_created = Signal()

# Arguments: post, field ('topic_status' or 'outline_status'), old, new, actor
post_status_changed = Signal()

# Arguments: post, actor
outline_submitted = Signal()

# Arguments: post, actor
result_submitted = Signal()
