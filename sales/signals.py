"""
Sales reactions to campaign events.

A campaign created with a budget books its contract revenue as a sale of
the shared contract product, credited to the campaign manager.
"""

import logging
from decimal import Decimal

from django.conf import settings
from django.db import transaction
from django.dispatch import receiver
from django.utils import timezone

from campaigns.events import campaign_created
from catalog.models import Product
from .models import Sale

logger = logging.getLogger(__name__)


def get_contract_product():
    """Shared catalog product used for campaign contract revenue."""
    product, created = Product.objects.get_or_create(
        sku=settings.CAMPAIGN_CONTRACT_PRODUCT_SKU,
        defaults={
            'name': settings.CAMPAIGN_CONTRACT_PRODUCT_NAME,
            'description': '캠페인 생성 시 자동 생성되는 계약매출',
            'category': '캠페인',
            'cost_price': Decimal('0'),
            'selling_price': Decimal('0'),
            'unit': '건',
            'company': None,
        }
    )
    if created:
        logger.info(f"Created shared contract product {product.sku}")
    return product


@receiver(campaign_created, dispatch_uid='sales.create_contract_sale')
def create_contract_sale(sender, campaign, actor=None, **kwargs):
    """Record the campaign budget as a registered sale."""
    if not campaign.budget or campaign.budget <= 0:
        return None

    client = campaign.client
    with transaction.atomic():
        sale = Sale.objects.create(
            product=get_contract_product(),
            sales_person_id=campaign.manager_id,
            campaign=campaign,
            quantity=1,
            actual_cost_price=Decimal('0'),
            actual_selling_price=campaign.budget,
            status=Sale.STATUS_REGISTERED,
            sale_date=timezone.now(),
            client_name=campaign.client_name or client.get_full_name() or '미정',
            client_contact=client.get_full_name(),
            client_email=client.email or '',
            memo=f'캠페인 "{campaign.name}" 자동 생성 매출',
        )

    logger.info(f"Contract sale {sale.sale_number} created for campaign {campaign.pk} ({campaign.budget})")
    return sale
