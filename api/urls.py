"""
API URL Configuration (mounted under /api/v1/)
"""
from django.urls import path

from .views import auth, cart, catalog, orders, payments, reviews, stores

app_name = 'api'

urlpatterns = [
    # Auth
    path('auth/register/', auth.RegisterView.as_view(), name='auth-register'),
    path('auth/login/', auth.LoginView.as_view(), name='auth-login'),
    path('auth/refresh/', auth.RefreshTokenView.as_view(), name='auth-refresh'),
    path('auth/logout/', auth.LogoutView.as_view(), name='auth-logout'),
    path('auth/me/', auth.MeView.as_view(), name='auth-me'),

    # Catalog
    path('products/', catalog.ProductListView.as_view(), name='product-list'),
    path('products/<uuid:product_id>/', catalog.ProductDetailView.as_view(), name='product-detail'),

    # Cart
    path('cart/', cart.CartView.as_view(), name='cart'),
    path('cart/add/', cart.CartAddView.as_view(), name='cart-add'),
    path('cart/count/', cart.CartCountView.as_view(), name='cart-count'),
    path('cart/<uuid:item_id>/', cart.CartItemView.as_view(), name='cart-item'),

    # Orders
    path('orders/', orders.OrderListCreateView.as_view(), name='order-list'),
    path('orders/admin/all/', orders.AdminOrderListView.as_view(), name='order-admin-list'),
    path('orders/admin/analytics/', orders.AdminOrderAnalyticsView.as_view(), name='order-admin-analytics'),
    path('orders/admin/<uuid:order_id>/status/', orders.AdminOrderStatusView.as_view(), name='order-admin-status'),
    path('orders/<uuid:order_id>/', orders.OrderDetailView.as_view(), name='order-detail'),
    path('orders/<uuid:order_id>/cancel/', orders.OrderCancelView.as_view(), name='order-cancel'),

    # Reviews
    path('reviews/', reviews.ReviewCreateView.as_view(), name='review-create'),
    path('reviews/product/<uuid:product_id>/', reviews.ProductReviewsView.as_view(), name='review-product'),
    path('reviews/user/my-reviews/', reviews.MyReviewsView.as_view(), name='review-mine'),
    path('reviews/user/can-review/', reviews.ReviewableProductsView.as_view(), name='review-can-review'),
    path('reviews/<uuid:review_id>/', reviews.ReviewDetailView.as_view(), name='review-detail'),
    path('reviews/<uuid:review_id>/helpful/', reviews.ReviewHelpfulView.as_view(), name='review-helpful'),

    # Payments
    path('payments/create-intent/', payments.CreatePaymentIntentView.as_view(), name='payment-create-intent'),
    path('payments/confirm-intent/<str:intent_id>/', payments.ConfirmPaymentIntentView.as_view(), name='payment-confirm-intent'),
    path('payments/save-payment-method/', payments.SavePaymentMethodView.as_view(), name='payment-save-method'),
    path('payments/payment-methods/', payments.PaymentMethodListView.as_view(), name='payment-methods'),
    path('payments/payment-methods/<uuid:method_id>/', payments.PaymentMethodDetailView.as_view(), name='payment-method-detail'),
    path('payments/refund/', payments.RefundView.as_view(), name='payment-refund'),
    path('payments/webhook/', payments.StripeWebhookView.as_view(), name='payment-webhook'),

    # Stores
    path('stores/', stores.StoreListView.as_view(), name='store-list'),
    path('stores/enroll/', stores.StoreEnrollView.as_view(), name='store-enroll'),
    path('stores/seller/my-stores/', stores.MyStoresView.as_view(), name='store-mine'),
    path('stores/admin/pending/', stores.PendingStoresView.as_view(), name='store-admin-pending'),
    path('stores/admin/<uuid:store_id>/status/', stores.StoreStatusView.as_view(), name='store-admin-status'),
    path('stores/<uuid:store_id>/', stores.StoreDetailView.as_view(), name='store-detail'),
    path('stores/<uuid:store_id>/analytics/', stores.StoreAnalyticsView.as_view(), name='store-analytics'),
    path('stores/<uuid:store_id>/reviews/', stores.StoreReviewCreateView.as_view(), name='store-review-create'),
]
