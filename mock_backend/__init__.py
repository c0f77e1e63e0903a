# Mock catalog/account backend used by the storefront in development and tests
