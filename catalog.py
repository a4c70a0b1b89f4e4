def filter_products(products, search="", category_id=None):
    """
    Yield the active products whose name contains search (case-insensitive)
    and, when category_id is given, that belong to that category.
    """
    term = (search or "").lower()
    for product in products:
        if not product.is_active:
            continue
        if term and term not in product.name.lower():
            continue
        if category_id is not None and product.category_id != category_id:
            continue
        yield product


def find_product(products, product_id):
    for product in products:
        if product.id == product_id:
            return product
    return None
