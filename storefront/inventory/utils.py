def get_inventory_status(quantity, threshold):
    """
    Stock status for a quantity.

    Nothing left is out of stock; at or below the threshold is low stock.
    """
    if quantity <= 0:
        return 'out_of_stock'
    if quantity <= threshold:
        return 'low_stock'
    return 'in_stock'
