# cart/procedures.py
from core.rpc import procedure
from . import services
from .forms import AddToCartForm, UpdateCartItemForm, CartOwnerForm, RemoveFromCartForm


def serialize_cart_item(item):
    return {
        'id':         item.pk,
        'user_id':    item.user_id,
        'product_id': item.product_id,
        'quantity':   item.quantity,
        'created_at': item.created_at,
        'updated_at': item.updated_at,
    }


@procedure('cart.add', form=AddToCartForm, mutation=True)
def cart_add(data):
    return serialize_cart_item(services.add_to_cart(**data))


@procedure('cart.list', form=CartOwnerForm)
def cart_list(data):
    result = []
    for item in services.get_cart_items(data['userId']):
        row = serialize_cart_item(item)
        row['product'] = {
            'id':        item.product.pk,
            'name':      item.product.name,
            'price':     item.product.price,
            'image_url': item.product.image_url,
            'type':      item.product.type,
        }
        result.append(row)
    return result


@procedure('cart.update', form=UpdateCartItemForm, mutation=True)
def cart_update(data):
    return serialize_cart_item(services.update_cart_item(data['id'], data['quantity']))


@procedure('cart.remove', form=RemoveFromCartForm, mutation=True)
def cart_remove(data):
    return services.remove_from_cart(data['itemId'], data['userId'])


@procedure('cart.clear', form=CartOwnerForm, mutation=True)
def cart_clear(data):
    return services.clear_cart(data['userId'])


@procedure('cart.summary', form=CartOwnerForm)
def cart_summary(data):
    return services.get_cart_summary(data['userId'])
