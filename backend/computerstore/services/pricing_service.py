# Overview: Pure price/tax computation for sale items; no database access.

"""
Pricing calculator.

    price_before_taxes = purchase_price * (1 + supplier_markup + seller_markup)
    vat                = price_before_taxes * VAT_RATE            (always)
    price_with_vat     = price_before_taxes + vat
    sales_tax          = price_with_vat * SALES_TAX_RATE          (cash only)
    final_price        = price_with_vat + sales_tax

Each amount is rounded to cents before it feeds the next step, so
final_price == price_before_taxes + vat + sales_tax holds exactly and sale
totals are exact sums of stored item values.

The markup ceiling is exposed here but enforced by the sales engine.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable

from ..models import PAYMENT_CASH, PAYMENT_TYPES
from ..money import ZERO, quantize_money, to_decimal


VAT_RATE = Decimal("0.18")
SALES_TAX_RATE = Decimal("0.05")
MAX_TOTAL_MARKUP = Decimal("0.30")


@dataclass(frozen=True)
class PriceBreakdown:
    purchase_price: Decimal
    supplier_markup: Decimal
    seller_markup: Decimal
    price_before_taxes: Decimal
    vat: Decimal
    price_with_vat: Decimal
    sales_tax: Decimal
    final_price: Decimal


@dataclass(frozen=True)
class SaleTotals:
    total_amount: Decimal = ZERO
    total_with_vat: Decimal = ZERO
    total_with_sales_tax: Decimal = ZERO


def total_markup(supplier_markup, seller_markup) -> Decimal:
    return to_decimal(supplier_markup) + to_decimal(seller_markup)


def markup_exceeds_limit(supplier_markup, seller_markup) -> bool:
    return total_markup(supplier_markup, seller_markup) > MAX_TOTAL_MARKUP


def markup_percentage(markup: Decimal) -> str:
    """0.35 -> "35.00"."""
    return str(quantize_money(markup * 100))


def calculate_item_price(purchase_price, supplier_markup, seller_markup, payment_type: str) -> PriceBreakdown:
    """Price one equipment unit for the given payment type."""
    if payment_type not in PAYMENT_TYPES:
        raise ValueError(f"unknown payment type: {payment_type!r}")

    purchase_price = to_decimal(purchase_price)
    supplier_markup = to_decimal(supplier_markup)
    seller_markup = to_decimal(seller_markup)

    price_before_taxes = quantize_money(purchase_price * (1 + supplier_markup + seller_markup))
    vat = quantize_money(price_before_taxes * VAT_RATE)
    price_with_vat = price_before_taxes + vat

    if payment_type == PAYMENT_CASH:
        sales_tax = quantize_money(price_with_vat * SALES_TAX_RATE)
    else:
        sales_tax = ZERO
    final_price = price_with_vat + sales_tax

    return PriceBreakdown(
        purchase_price=purchase_price,
        supplier_markup=supplier_markup,
        seller_markup=seller_markup,
        price_before_taxes=price_before_taxes,
        vat=vat,
        price_with_vat=price_with_vat,
        sales_tax=sales_tax,
        final_price=final_price,
    )


def summarize(breakdowns: Iterable[PriceBreakdown]) -> SaleTotals:
    total_amount = ZERO
    total_with_vat = ZERO
    total_with_sales_tax = ZERO
    for b in breakdowns:
        total_amount += b.price_before_taxes
        total_with_vat += b.price_with_vat
        total_with_sales_tax += b.final_price
    return SaleTotals(
        total_amount=total_amount,
        total_with_vat=total_with_vat,
        total_with_sales_tax=total_with_sales_tax,
    )
