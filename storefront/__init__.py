# Storefront web application
