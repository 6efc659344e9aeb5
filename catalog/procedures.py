# catalog/procedures.py
from core.forms import IdForm
from core.rpc import procedure
from . import services
from .forms import (
    CategoryCreateForm, CategoryUpdateForm,
    ProductCreateForm, ProductUpdateForm, ProductListForm, ProductSearchForm,
)


def serialize_category(category):
    if category is None:
        return None
    return {
        'id':          category.pk,
        'name':        category.name,
        'description': category.description,
        'slug':        category.slug,
        'is_active':   category.is_active,
        'created_at':  category.created_at,
        'updated_at':  category.updated_at,
    }


def serialize_product(product):
    if product is None:
        return None
    return {
        'id':             product.pk,
        'name':           product.name,
        'description':    product.description,
        'price':          product.price,
        'type':           product.type,
        'category_id':    product.category_id,
        'image_url':      product.image_url,
        'download_url':   product.download_url,
        'stock_quantity': product.stock_quantity,
        'is_active':      product.is_active,
        'created_at':     product.created_at,
        'updated_at':     product.updated_at,
    }


# ==================== CATEGORIES ====================

@procedure('categories.create', form=CategoryCreateForm, mutation=True)
def categories_create(data):
    return serialize_category(services.create_category(**data))


@procedure('categories.list')
def categories_list(data):
    return [serialize_category(c) for c in services.list_categories()]


@procedure('categories.getById', form=IdForm)
def categories_get_by_id(data):
    return serialize_category(services.get_category(data['id']))


@procedure('categories.update', form=CategoryUpdateForm, mutation=True)
def categories_update(data):
    category_id = data.pop('id')
    return serialize_category(services.update_category(category_id, **data))


@procedure('categories.delete', form=IdForm, mutation=True)
def categories_delete(data):
    return services.delete_category(data['id'])


# ==================== PRODUCTS ====================

@procedure('products.create', form=ProductCreateForm, mutation=True)
def products_create(data):
    return serialize_product(services.create_product(**data))


@procedure('products.list', form=ProductListForm)
def products_list(data):
    return [serialize_product(p) for p in services.list_products(**data)]


@procedure('products.getById', form=IdForm)
def products_get_by_id(data):
    return serialize_product(services.get_product(data['id']))


@procedure('products.getByIdWithDetails', form=IdForm)
def products_get_by_id_with_details(data):
    details = services.get_product_with_details(data['id'])
    if details is None:
        return None

    result = serialize_product(details['product'])
    result.update({
        'category':       details['category'],
        'reviews':        details['reviews'],
        'average_rating': details['average_rating'],
    })
    return result


@procedure('products.update', form=ProductUpdateForm, mutation=True)
def products_update(data):
    product_id = data.pop('id')
    return serialize_product(services.update_product(product_id, **data))


@procedure('products.delete', form=IdForm, mutation=True)
def products_delete(data):
    return services.delete_product(data['id'])


@procedure('products.search', form=ProductSearchForm)
def products_search(data):
    return [serialize_product(p) for p in services.search_products(data['query'], data.get('limit') or 10)]
