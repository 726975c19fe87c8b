"""Action handlers implementados en este repo.

Los demás dominios (account, cart, wishlist, project, nuvei) los aporta un
paquete externo; ver `AppSettings.action_modules`.
"""
