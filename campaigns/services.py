"""
Campaign financial summary.

Revenue is the contract budget plus product revenue from completed tasks.
A task counts as completed once it has a published URL, a product and a
quantity.
"""

import logging
from decimal import Decimal, ROUND_HALF_UP

logger = logging.getLogger(__name__)

ZERO = Decimal('0')


def _money(value):
    return str(value.quantize(Decimal('0.01'), rounding=ROUND_HALF_UP))


def completed_posts(posts):
    return [post for post in posts if post.published_url and post.product_id and post.quantity]


def budget_utilization(product_revenue, budget):
    """Product revenue as a percentage of the budget, 2 decimals; 0 without a budget."""
    if not budget:
        return ZERO
    rate = product_revenue / budget * 100
    return rate.quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)


def build_financial_summary(campaign):
    """
    Compute the financial summary of one campaign.

    Args:
        campaign: Campaign instance; posts and their products are read
            through campaign.posts

    Returns:
        dict ready to be serialized
    """
    posts = list(campaign.posts.select_related('product'))
    budget = campaign.budget or ZERO

    product_revenue = ZERO
    total_cost = ZERO
    details = []
    done = completed_posts(posts)
    for post in done:
        revenue = post.product.selling_price * post.quantity
        cost = post.product.cost_price * post.quantity
        product_revenue += revenue
        total_cost += cost
        details.append({
            'task_id': post.id,
            'task_title': post.title,
            'product': {
                'id': post.product.id,
                'name': post.product.name,
                'category': post.product.category,
            },
            'quantity': post.quantity,
            'revenue': _money(revenue),
            'cost': _money(cost),
            'profit': _money(revenue - cost),
        })

    total_revenue = budget + product_revenue
    summary = {
        'campaign_id': campaign.id,
        'campaign_name': campaign.name,
        'budget': _money(budget),
        'product_based_revenue': _money(product_revenue),
        'total_revenue': _money(total_revenue),
        'total_cost': _money(total_cost),
        'total_profit': _money(total_revenue - total_cost),
        'budget_utilization': str(budget_utilization(product_revenue, budget)),
        'completed_tasks_count': len(done),
        'total_tasks_count': len(posts),
        'task_details': details,
    }
    logger.debug(f"Financial summary for campaign {campaign.id}: {len(done)}/{len(posts)} tasks completed")
    return summary
