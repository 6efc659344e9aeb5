# orders/procedures.py
from core.rpc import procedure
from core.forms import IdForm
from . import services
from .forms import (
    CreateOrderForm, CancelOrderForm, UpdateStatusForm,
    UpdatePaymentStatusForm, OrderListForm, UserOrdersForm,
)


def serialize_order(order):
    return {
        'id':              order.pk,
        'user_id':         order.user_id,
        'total_amount':    order.total_amount,
        'discount_amount': order.discount_amount,
        'final_amount':    order.final_amount,
        'coupon_id':       order.coupon_id,
        'status':          order.status,
        'payment_status':  order.payment_status,
        'created_at':      order.created_at,
        'updated_at':      order.updated_at,
    }


def serialize_order_item(item):
    return {
        'id':          item.pk,
        'order_id':    item.order_id,
        'product_id':  item.product_id,
        'quantity':    item.quantity,
        'unit_price':  item.unit_price,
        'total_price': item.total_price,
        'created_at':  item.created_at,
    }


@procedure('orders.create', form=CreateOrderForm, mutation=True)
def orders_create(data):
    return serialize_order(services.create_order(**data))


@procedure('orders.list', form=OrderListForm)
def orders_list(data):
    return [serialize_order(o) for o in services.list_orders(**data)]


@procedure('orders.getUserOrders', form=UserOrdersForm)
def orders_get_user_orders(data):
    result = []
    for order in services.get_user_orders(data['userId']):
        row = serialize_order(order)
        row['orderItems'] = []
        for item in order.items.all():
            line = serialize_order_item(item)
            line['product'] = {
                'name':         item.product.name,
                'type':         item.product.type,
                'download_url': item.product.download_url,
            }
            row['orderItems'].append(line)
        result.append(row)
    return result


@procedure('orders.getById', form=IdForm)
def orders_get_by_id(data):
    order = services.get_order(data['id'])
    if order is None:
        return None

    result = serialize_order(order)
    result['user'] = {
        'first_name': order.user.first_name,
        'last_name':  order.user.last_name,
        'email':      order.user.email,
    }
    result['orderItems'] = []
    for item in order.items.all():
        line = serialize_order_item(item)
        line['product'] = {'name': item.product.name, 'type': item.product.type}
        result['orderItems'].append(line)
    result['coupon'] = None
    if order.coupon is not None:
        result['coupon'] = {
            'code':  order.coupon.code,
            'type':  order.coupon.type,
            'value': order.coupon.value,
        }
    return result


@procedure('orders.updateStatus', form=UpdateStatusForm, mutation=True)
def orders_update_status(data):
    return serialize_order(services.update_order_status(data['id'], data['status']))


@procedure('orders.updatePaymentStatus', form=UpdatePaymentStatusForm, mutation=True)
def orders_update_payment_status(data):
    return serialize_order(services.update_payment_status(data['id'], data['payment_status']))


@procedure('orders.cancel', form=CancelOrderForm, mutation=True)
def orders_cancel(data):
    return serialize_order(services.cancel_order(data['id'], data.get('user_id')))
