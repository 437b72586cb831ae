from bookstore.models.user import User
from bookstore.models.book import Book
from bookstore.models.cart import CartItem
from bookstore.models.order_item import OrderItem
from bookstore.models.order import Order

# add ALL models here
