# Shopper-side modules shared by the storefront client code
