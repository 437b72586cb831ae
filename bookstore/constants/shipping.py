from enum import Enum

# Per-book parcel size used for every GHN request
BOOK_WEIGHT = 300  # grams
BOOK_LENGTH = 25   # cm
BOOK_WIDTH = 20    # cm
BOOK_HEIGHT = 2    # cm, stacked per book

GHN_SERVICE_TYPE = 2  # standard
GHN_REQUIRED_NOTE = "KHONGCHOXEMHANG"
GHN_SUCCESS_CODE = 200
GHN_SUCCESS_MESSAGE = "Success"

# payment_type_id: 1 = shop pays shipping, 2 = receiver pays
GHN_PAYMENT_SHOP = 1
GHN_PAYMENT_RECEIVER = 2

# master-data entries usable for delivery
GHN_STATUS_ACTIVE = 1
GHN_ENABLED = 1
GHN_SUPPORT_DELIVERY = 3


class PaymentMethod(str, Enum):
    COD = "COD"
    MOMO = "MOMO"
