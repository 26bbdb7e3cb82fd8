"""
Shopping cart endpoints
"""
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.views import APIView

from apps.cart import services
from ..serializers.cart import AddToCartSerializer, CartItemSerializer, UpdateCartItemSerializer, cart_payload
from .base import success, validate


class CartView(APIView):
    """
    The signed-in user's cart with totals priced from current product prices.
    """

    def get(self, request):
        """
        Return cart lines plus subtotal, tax, shipping and total.
        """
        return success('Cart retrieved successfully', cart_payload(services.get_cart(request.user)))

    def delete(self, request):
        """
        Remove every line from the cart.
        """
        services.clear_cart(request.user)
        return success('Cart cleared successfully')


class CartAddView(APIView):
    """
    Add a product to the cart, merging with an existing line.
    """

    @extend_schema(request=AddToCartSerializer, responses={201: CartItemSerializer})
    def post(self, request):
        data = validate(AddToCartSerializer, request.data)
        item = services.add_item(request.user, data['product_id'], data['quantity'], data.get('selected_variants'))
        return success(
            'Item added to cart successfully',
            {'item': CartItemSerializer(item).data},
            status_code=status.HTTP_201_CREATED,
        )


class CartItemView(APIView):
    """
    Change or remove a single cart line.
    """

    @extend_schema(request=UpdateCartItemSerializer, responses={200: CartItemSerializer})
    def put(self, request, item_id):
        """
        Set the line quantity; zero removes the line.
        """
        data = validate(UpdateCartItemSerializer, request.data)
        item = services.update_quantity(request.user, item_id, data['quantity'])
        if item is None:
            return success('Item removed from cart')
        return success('Cart item updated successfully', {'item': CartItemSerializer(item).data})

    def delete(self, request, item_id):
        services.remove_item(request.user, item_id)
        return success('Item removed from cart')


class CartCountView(APIView):
    """
    Total quantity across cart lines, for the header badge.
    """

    def get(self, request):
        return success('Cart count retrieved successfully', {'count': services.item_count(request.user)})
