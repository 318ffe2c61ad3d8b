"""Which overridable rule fields apply to a seller type."""

from pydantic import BaseModel, ConfigDict

from sellerfees.core.models import SellerType


class RuleVisibility(BaseModel):
    model_config = ConfigDict(frozen=True)

    campaign_extra_rate: bool
    cpf_extra_fee: bool
    cpf_extra_orders_threshold_90d: bool
    cnpj_low_price_threshold: bool
    cpf_low_price_threshold: bool


def get_rule_visibility(seller_type: SellerType) -> RuleVisibility:
    if seller_type == SellerType.CPF:
        return RuleVisibility(
            campaign_extra_rate=True,
            cpf_extra_fee=True,
            cpf_extra_orders_threshold_90d=True,
            cnpj_low_price_threshold=False,
            cpf_low_price_threshold=True,
        )

    return RuleVisibility(
        campaign_extra_rate=True,
        cpf_extra_fee=False,
        cpf_extra_orders_threshold_90d=False,
        cnpj_low_price_threshold=True,
        cpf_low_price_threshold=False,
    )
