"""Demo data for local development.
(Imported by scripts/seed_demo.py; not loaded by the application.)
"""

SUPER_ADMIN = {
    'name': 'Demo Admin',
    'email': 'admin@example.com',
    'password': 'Admin@123',
}

PRODUCTS = [
    {
        'name': 'Wireless Mouse',
        'description': 'Ergonomic wireless mouse with 2.4GHz connection. Perfect for office work and gaming.',
        'price': '29.99', 'stock': 50, 'category': 'Electronics',
        'images': ['https://images.unsplash.com/photo-1527864550417-7fd91fc51a46?w=400'],
    },
    {
        'name': 'Mechanical Keyboard',
        'description': 'RGB mechanical gaming keyboard with blue switches.',
        'price': '89.99', 'stock': 30, 'category': 'Electronics',
        'images': ['https://images.unsplash.com/photo-1595225476474-87563907a212?w=400'],
    },
    {
        'name': 'USB-C Cable',
        'description': 'High-speed USB-C charging cable, 6ft length.',
        'price': '12.99', 'stock': 100, 'category': 'Accessories',
        'images': ['https://images.unsplash.com/photo-1585298723682-7115561c51b7?w=400'],
    },
    {
        'name': 'Laptop Stand',
        'description': 'Adjustable aluminum laptop stand. Improves ergonomics and cooling.',
        'price': '45.50', 'stock': 25, 'category': 'Accessories',
        'images': ['https://images.unsplash.com/photo-1527864550417-7fd91fc51a46?w=400'],
    },
    {
        'name': 'Wireless Headphones',
        'description': 'Noise-cancelling over-ear headphones with 30-hour battery life.',
        'price': '199.99', 'stock': 15, 'category': 'Electronics',
        'images': ['https://images.unsplash.com/photo-1505740420928-5e560c06d30e?w=400'],
    },
    {
        'name': 'Phone Case',
        'description': 'Protective silicone phone case. Shockproof and scratch-resistant.',
        'price': '15.99', 'stock': 8, 'category': 'Accessories',
        'images': ['https://images.unsplash.com/photo-1601784551446-20c9e07cdbdb?w=400'],
    },
]
