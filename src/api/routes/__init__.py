"""Route modules for the ShopCatalog API."""
