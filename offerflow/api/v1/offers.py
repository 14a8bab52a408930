from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException

from offerflow.api.v1.schemas import (
    ChooseMandatoryItemRequestSchema, ChooseOptionRequestSchema, ToggleOptionalItemRequestSchema,
    ConfirmResponseSchema, OfferViewSchema, OptionViewSchema, PricedLineSchema, ScopeViewSchema, TotalsSchema,
)
from offerflow.application.exceptions import (
    CatalogReferenceError, ConfirmationInProgressError, OfferNotFoundError,
    OfferPersistenceError, SelectionValidationError,
)
from offerflow.application.use_cases.offer_session import OfferSession
from offerflow.application.use_cases.pricing import variant_price
from offerflow.application.utils.money import format_money, round_money
from offerflow.application.utils.offer_status import can_respond
from offerflow.application.utils.snapshot_codec import snapshot_to_dict
from offerflow.core.config import settings
from offerflow.domain.entities.totals import OfferTotals
from offerflow.infrastructure.store.session_registry import OfferSessionRegistry
from offerflow.wiring.dependencies import get_session_registry

router = APIRouter()


def _money(value: Decimal) -> float:
    return float(round_money(value))


def _totals_schema(totals: OfferTotals) -> TotalsSchema:
    return TotalsSchema(
        total_net=_money(totals.net),
        total_gross=_money(totals.gross),
        vat=_money(totals.vat),
        formatted_net=format_money(totals.net, settings.CURRENCY),
        formatted_gross=format_money(totals.gross, settings.CURRENCY),
    )


def _offer_view(session: OfferSession) -> OfferViewSchema:
    catalog = session.catalog
    state = session.state
    breakdown = session.breakdown()
    hide_prices = catalog.hide_unit_prices

    scopes = [
        ScopeViewSchema(
            id=scope.id,
            name=scope.name,
            is_extras=scope.is_extras,
            options=[
                OptionViewSchema(
                    id=option.id,
                    name=option.name,
                    is_upsell=option.is_upsell,
                    price_net=_money(variant_price(option, state)),
                    item_ids=[item.id for item in option.items],
                )
                for option in catalog.options
                if option.scope_id == scope.id
            ],
        )
        for scope in catalog.scopes
    ]

    return OfferViewSchema(
        offer_id=session.offer.id,
        offer_number=session.offer.offer_number,
        status=session.offer.status,
        can_respond=can_respond(session.offer, open_statuses=frozenset(settings.PUBLIC_OFFER_STATUSES)),
        editing=session.editing,
        responding=session.responding,
        interactions_disabled=session.interactions_disabled,
        vat_rate=float(catalog.vat_rate),
        hide_unit_prices=hide_prices,
        currency=settings.CURRENCY,
        selection=snapshot_to_dict(state),
        totals=_totals_schema(breakdown.totals),
        lines=[
            PricedLineSchema(
                option_id=line.option_id,
                item_id=line.item_id,
                name=line.name,
                quantity=float(line.quantity),
                unit_price=None if hide_prices else float(line.unit_price),
                discount_percent=float(line.discount_percent),
                line_net=_money(line.line_net),
                is_optional=line.is_optional,
            )
            for line in breakdown.lines
        ],
        option_subtotals={key: _money(value) for key, value in breakdown.option_subtotals.items()},
        scopes=scopes,
    )


def _session(registry: OfferSessionRegistry, offer_id: str) -> OfferSession:
    try:
        return registry.get_or_open(offer_id)
    except OfferNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except OfferPersistenceError as e:
        raise HTTPException(status_code=502, detail=str(e))


@router.get("/offers/{offer_id}", response_model=OfferViewSchema)
def get_offer(offer_id: str, registry: OfferSessionRegistry = Depends(get_session_registry)):
    return _offer_view(_session(registry, offer_id))


@router.post("/offers/{offer_id}/selection/option", response_model=OfferViewSchema)
def choose_option(
    offer_id: str,
    req: ChooseOptionRequestSchema,
    registry: OfferSessionRegistry = Depends(get_session_registry),
):
    session = _session(registry, offer_id)
    try:
        session.choose_option(req.scope_id, req.option_id)
    except (CatalogReferenceError, SelectionValidationError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _offer_view(session)


@router.post("/offers/{offer_id}/selection/optional-item", response_model=OfferViewSchema)
def toggle_optional_item(
    offer_id: str,
    req: ToggleOptionalItemRequestSchema,
    registry: OfferSessionRegistry = Depends(get_session_registry),
):
    session = _session(registry, offer_id)
    try:
        session.toggle_optional_item(req.item_id)
    except (CatalogReferenceError, SelectionValidationError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _offer_view(session)


@router.post("/offers/{offer_id}/selection/mandatory-item", response_model=OfferViewSchema)
def choose_mandatory_item(
    offer_id: str,
    req: ChooseMandatoryItemRequestSchema,
    registry: OfferSessionRegistry = Depends(get_session_registry),
):
    session = _session(registry, offer_id)
    try:
        session.choose_mandatory_item(req.option_id, req.item_id)
    except (CatalogReferenceError, SelectionValidationError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _offer_view(session)


@router.post("/offers/{offer_id}/edit", response_model=OfferViewSchema)
def begin_edit(offer_id: str, registry: OfferSessionRegistry = Depends(get_session_registry)):
    session = _session(registry, offer_id)
    try:
        session.begin_edit()
    except SelectionValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _offer_view(session)


@router.post("/offers/{offer_id}/edit/cancel", response_model=OfferViewSchema)
def cancel_edit(offer_id: str, registry: OfferSessionRegistry = Depends(get_session_registry)):
    session = _session(registry, offer_id)
    session.cancel_edit()
    return _offer_view(session)


@router.post("/offers/{offer_id}/confirm", response_model=ConfirmResponseSchema)
async def confirm(offer_id: str, registry: OfferSessionRegistry = Depends(get_session_registry)):
    session = _session(registry, offer_id)
    try:
        result = await session.confirm()
    except SelectionValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ConfirmationInProgressError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except OfferNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except OfferPersistenceError as e:
        raise HTTPException(status_code=502, detail=str(e))

    # The next request reloads the accepted offer from the store.
    registry.close(offer_id)
    return ConfirmResponseSchema(
        offer_id=result.offer_id,
        approved_at=result.approved_at,
        selection=result.snapshot,
        totals=_totals_schema(result.totals),
    )
