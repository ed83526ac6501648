"""
Discount Sorter - sort Shopify collections by discount percentage.
"""
