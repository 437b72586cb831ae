import json
import logging
import unicodedata
from typing import Any, List, Optional

import redis
import requests
from fastapi import Depends

from bookstore.cache import get_redis
from bookstore.config import settings
from bookstore.constants.shipping import (
    BOOK_HEIGHT,
    BOOK_LENGTH,
    BOOK_WEIGHT,
    BOOK_WIDTH,
    GHN_ENABLED,
    GHN_PAYMENT_RECEIVER,
    GHN_PAYMENT_SHOP,
    GHN_REQUIRED_NOTE,
    GHN_SERVICE_TYPE,
    GHN_STATUS_ACTIVE,
    GHN_SUCCESS_CODE,
    GHN_SUCCESS_MESSAGE,
    GHN_SUPPORT_DELIVERY,
    PaymentMethod,
)

logger = logging.getLogger(__name__)


class ShippingError(Exception):
    """Any failure talking to GHN or its cache."""


VIETNAMESE_ALPHABET = "aăâbcdđeêfghijklmnoôơpqrstuưvwxyz"
LETTER_RANK = {letter: rank for rank, letter in enumerate(VIETNAMESE_ALPHABET)}

# breve, circumflex and horn form letters of their own (ă, â, ơ, ư ...)
LETTER_MARKS = {"\u0306", "\u0302", "\u031b"}

# grave < hook above < tilde < acute < dot below
TONE_RANK = {"\u0300": 1, "\u0309": 2, "\u0303": 3, "\u0301": 4, "\u0323": 5}


def _split_tone(char: str):
    decomposed = unicodedata.normalize("NFD", char)
    marks = decomposed[1:]
    letter = decomposed[:1] + "".join(mark for mark in marks if mark in LETTER_MARKS)
    tone = max((TONE_RANK.get(mark, 0) for mark in marks), default=0)
    return unicodedata.normalize("NFC", letter), tone


def vietnamese_sort_key(name: str):
    """
    Collation key for Vietnamese place names.

    Letters compare by their rank in the Vietnamese alphabet, so d < đ and
    a < ă < â. Tone marks only decide between otherwise equal names, then
    lowercase sorts before uppercase. Spaces, digits and punctuation sort
    before letters.
    """
    letters, tones, cases = [], [], []
    for char in name:
        letter, tone = _split_tone(char.lower())
        rank = LETTER_RANK.get(letter)
        letters.append((1, rank) if rank is not None else (0, ord(letter[0])))
        tones.append(tone)
        cases.append(char != char.lower())
    return tuple(letters), tuple(tones), tuple(cases), name


def build_preview_payload(district_id: int, ward_code: str, quantity: int) -> dict:
    # recipient fields are required by the API but do not affect the fee
    return {
        "payment_type_id": GHN_PAYMENT_RECEIVER,
        "required_note": GHN_REQUIRED_NOTE,
        "to_name": "Preview",
        "to_phone": "0971443356",
        "to_address": "Preview",
        "to_ward_code": ward_code,
        "to_district_id": district_id,
        "weight": quantity * BOOK_WEIGHT,
        "length": BOOK_LENGTH,
        "width": BOOK_WIDTH,
        "height": quantity * BOOK_HEIGHT,
        "service_type_id": GHN_SERVICE_TYPE,
        "items": [
            {
                "name": "Book",
                "quantity": quantity,
                "weight": quantity * BOOK_WEIGHT,
            }
        ],
    }


def build_order_payload(
    *,
    name: str,
    phone: str,
    address: str,
    payment: PaymentMethod,
    district_id: int,
    ward_code: str,
    quantity: int,
    note: Optional[str] = None,
) -> dict:
    payload = build_preview_payload(district_id, ward_code, quantity)
    payload.update({
        "payment_type_id": GHN_PAYMENT_RECEIVER if payment == PaymentMethod.COD else GHN_PAYMENT_SHOP,
        "to_name": name,
        "to_phone": phone,
        "to_address": address,
        "note": note or "",
    })
    return payload


def _usable(entry: dict, id_field: str, name_field: str, delivery_only: bool) -> bool:
    if entry.get("Status") != GHN_STATUS_ACTIVE or entry.get("IsEnable") != GHN_ENABLED:
        return False
    if entry.get(id_field) is None or entry.get(name_field) is None:
        return False
    if delivery_only and entry.get("SupportType") != GHN_SUPPORT_DELIVERY:
        return False
    return True


class GHNClient:
    """
    Client for the GHN (Giao Hang Nhanh) shipping API.

    Master data and fee previews are read through the key-value cache:
    a hit never reaches the network, a miss stores the projected result.
    Order creation always goes to GHN.
    """

    def __init__(
        self,
        cache: redis.Redis,
        token: str,
        shop_id: str,
        end_point: str,
        cache_ttl: Optional[int] = None,
        timeout: float = 10.0,
        http: Optional[requests.Session] = None,
    ):
        self.cache = cache
        self.token = token
        self.shop_id = shop_id
        self.end_point = end_point.rstrip("/")
        self.cache_ttl = cache_ttl
        self.timeout = timeout
        self.http = http or requests.Session()

    # ---------- plumbing ----------

    def _headers(self, with_shop: bool = False) -> dict:
        headers = {
            "Content-Type": "application/json",
            "token": self.token,
        }
        if with_shop:
            headers["shop_id"] = str(self.shop_id)
        return headers

    def _request(
        self,
        method: str,
        path: str,
        payload: Optional[dict] = None,
        with_shop: bool = False,
    ) -> Any:
        url = f"{self.end_point}/{path}"
        logger.info(f"GHN {method} {path}")

        try:
            response = self.http.request(
                method,
                url,
                json=payload,
                headers=self._headers(with_shop),
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise ShippingError(f"Failed to reach GHN: {exc}") from exc

        if not response.ok:
            logger.error(f"GHN {path} failed ({response.status_code}): {response.text}")
            raise ShippingError(f"Failed to fetch {path}")

        try:
            body = response.json()
        except ValueError as exc:
            raise ShippingError(f"Malformed response from {path}") from exc

        if (
            not isinstance(body, dict)
            or body.get("code") != GHN_SUCCESS_CODE
            or body.get("message") != GHN_SUCCESS_MESSAGE
        ):
            logger.warning(f"GHN {path} rejected: {body}")
            raise ShippingError("Fetched data has failed status")

        return body.get("data")

    def _cached(self, key: str) -> Optional[Any]:
        try:
            raw = self.cache.get(key)
        except redis.RedisError as exc:
            raise ShippingError("Shipping cache unavailable") from exc
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError as exc:
            logger.error(f"Corrupt shipping cache entry {key}")
            raise ShippingError("Shipping cache entry is corrupt") from exc

    def _store(self, key: str, value: Any) -> None:
        try:
            self.cache.set(key, json.dumps(value, ensure_ascii=False), ex=self.cache_ttl)
        except redis.RedisError as exc:
            raise ShippingError("Shipping cache unavailable") from exc

    def _master_data(
        self,
        key: str,
        method: str,
        path: str,
        payload: Optional[dict],
        id_field: str,
        name_field: str,
        out_id: str,
        delivery_only: bool,
    ) -> List[dict]:
        cached = self._cached(key)
        if cached is not None:
            return cached

        data = self._request(method, path, payload)
        if not isinstance(data, list):
            raise ShippingError(f"Unexpected data from {path}")

        transformed = [
            {out_id: entry[id_field], "name": entry[name_field]}
            for entry in data
            if isinstance(entry, dict) and _usable(entry, id_field, name_field, delivery_only)
        ]
        transformed.sort(key=lambda item: vietnamese_sort_key(item["name"]))

        self._store(key, transformed)
        return transformed

    # ---------- address lookups ----------

    def get_provinces(self) -> List[dict]:
        return self._master_data(
            "province", "GET", "master-data/province", None,
            "ProvinceID", "ProvinceName", "id", delivery_only=False,
        )

    def get_districts(self, province_id: int) -> List[dict]:
        return self._master_data(
            f"district:{province_id}", "POST", "master-data/district",
            {"province_id": province_id},
            "DistrictID", "DistrictName", "id", delivery_only=True,
        )

    def get_wards(self, district_id: int) -> List[dict]:
        return self._master_data(
            f"ward:{district_id}", "POST", "master-data/ward",
            {"district_id": district_id},
            "WardCode", "WardName", "code", delivery_only=True,
        )

    # ---------- orders ----------

    def preview_order(self, district_id: int, ward_code: str, quantity: int) -> dict:
        key = f"preview-{district_id}-{ward_code}-{quantity}"

        cached = self._cached(key)
        if cached is not None:
            return cached

        data = self._request(
            "POST",
            "v2/shipping-order/preview",
            build_preview_payload(district_id, ward_code, quantity),
            with_shop=True,
        )

        try:
            preview = {
                "shipping_fee": data["total_fee"],
                "shipping_time": data["expected_delivery_time"],
            }
        except (TypeError, KeyError) as exc:
            raise ShippingError("Unexpected preview data") from exc

        self._store(key, preview)
        return preview

    def create_order(self, **order) -> str:
        """Create the shipment and return its GHN order code."""
        data = self._request(
            "POST",
            "v2/shipping-order/create",
            build_order_payload(**order),
            with_shop=True,
        )

        try:
            return data["order_code"]
        except (TypeError, KeyError) as exc:
            raise ShippingError("Unexpected create order data") from exc


_http = requests.Session()


def get_ghn_client(cache: redis.Redis = Depends(get_redis)) -> GHNClient:
    return GHNClient(
        cache=cache,
        token=settings.ghn_token_api,
        shop_id=settings.ghn_shop_id,
        end_point=settings.ghn_end_point,
        cache_ttl=settings.ghn_cache_ttl,
        timeout=settings.ghn_timeout,
        http=_http,
    )
