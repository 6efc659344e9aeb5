# promotions/procedures.py
from core.forms import IdForm
from core.rpc import procedure
from . import services
from .forms import CouponCreateForm, CouponUpdateForm, CouponCodeForm, CouponValidateForm


def serialize_coupon(coupon):
    if coupon is None:
        return None
    return {
        'id':                   coupon.pk,
        'code':                 coupon.code,
        'type':                 coupon.type,
        'value':                coupon.value,
        'minimum_order_amount': coupon.minimum_order_amount,
        'usage_limit':          coupon.usage_limit,
        'used_count':           coupon.used_count,
        'is_active':            coupon.is_active,
        'expires_at':           coupon.expires_at,
        'created_at':           coupon.created_at,
        'updated_at':           coupon.updated_at,
    }


@procedure('coupons.create', form=CouponCreateForm, mutation=True)
def coupons_create(data):
    return serialize_coupon(services.create_coupon(**data))


@procedure('coupons.list')
def coupons_list(data):
    return [serialize_coupon(c) for c in services.list_coupons()]


@procedure('coupons.getByCode', form=CouponCodeForm)
def coupons_get_by_code(data):
    return serialize_coupon(services.get_coupon_by_code(data['code']))


@procedure('coupons.validate', form=CouponValidateForm)
def coupons_validate(data):
    result = services.validate_coupon(data['code'], data['orderAmount'])
    if result['valid']:
        result['coupon'] = serialize_coupon(result['coupon'])
    return result


@procedure('coupons.update', form=CouponUpdateForm, mutation=True)
def coupons_update(data):
    coupon_id = data.pop('id')
    return serialize_coupon(services.update_coupon(coupon_id, **data))


@procedure('coupons.delete', form=IdForm, mutation=True)
def coupons_delete(data):
    return services.delete_coupon(data['id'])
