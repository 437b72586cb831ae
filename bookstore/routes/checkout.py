from fastapi import APIRouter, Depends, HTTPException, Path
from sqlmodel import Session
from typing import List

from bookstore.database import get_session
from bookstore.models.user import User
from bookstore.schemas.checkout_schemas import (
    District,
    PreviewInfo,
    PreviewOrderRequest,
    Province,
    SubmitOrderForm,
    SubmitOrderResponse,
    Ward,
)
from bookstore.services import checkout_service
from bookstore.services.checkout_service import CheckoutError
from bookstore.services.ghn_client import GHNClient, ShippingError, get_ghn_client
from bookstore.utils.session import get_current_user

router = APIRouter()


# ---------- ADDRESS LOOKUPS ----------

@router.get("/province", response_model=List[Province])
def provinces(ghn: GHNClient = Depends(get_ghn_client)):
    try:
        return ghn.get_provinces()
    except ShippingError as e:
        raise HTTPException(500, str(e))


@router.get("/district/{province_id}", response_model=List[District])
def districts(
    province_id: int = Path(..., ge=0),
    ghn: GHNClient = Depends(get_ghn_client)
):
    try:
        return ghn.get_districts(province_id)
    except ShippingError as e:
        raise HTTPException(500, str(e))


@router.get("/ward/{district_id}", response_model=List[Ward])
def wards(
    district_id: int = Path(..., ge=0),
    ghn: GHNClient = Depends(get_ghn_client)
):
    try:
        return ghn.get_wards(district_id)
    except ShippingError as e:
        raise HTTPException(500, str(e))


# ---------- ORDER ----------

@router.post("/preview-order", response_model=PreviewInfo)
def preview_order(
    data: PreviewOrderRequest,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
    ghn: GHNClient = Depends(get_ghn_client)
):
    try:
        return checkout_service.preview_order(
            session, ghn, current_user, data.district, data.ward
        )
    except CheckoutError as e:
        raise HTTPException(400, str(e))
    except ShippingError as e:
        raise HTTPException(500, str(e))


@router.post("/submit-order", response_model=SubmitOrderResponse, status_code=201)
def submit_order(
    form: SubmitOrderForm,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
    ghn: GHNClient = Depends(get_ghn_client)
):
    try:
        order = checkout_service.submit_order(session, ghn, current_user, form)
    except CheckoutError as e:
        raise HTTPException(400, str(e))
    except ShippingError as e:
        raise HTTPException(500, str(e))

    return SubmitOrderResponse(
        order_id=order.id,
        shipping_code=order.shipping_code,
        message="Order placed successfully",
    )
