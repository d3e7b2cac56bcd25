"""Core constants: collection names and cache key structure.

Single source of truth for collection names (they double as the entity
segment of every cache key) and for the key delimiters used by
app.infrastructure.cache.keys.
"""

# Collections (one per entity type)
COLLECTION_BUILDINGS = "edificios"
COLLECTION_SPACES = "espacios"
COLLECTION_OFFICES = "oficinas"
COLLECTION_RESERVATIONS = "reservas"
COLLECTION_ADDITIONAL_SERVICES = "servicios_adicionales"
COLLECTION_SERVICE_RESERVATIONS = "reservas_servicio"
COLLECTION_MEMBERSHIPS = "membresias"
COLLECTION_PAYMENTS = "pagos"
COLLECTION_REVIEWS = "resenas"
COLLECTION_PROMOTIONS = "promociones"
COLLECTION_NOTIFICATIONS = "notificaciones"
COLLECTION_USERS = "usuarios"
COLLECTION_AVAILABILITY = "disponibilidades"
COLLECTION_INVOICES = "facturas"

# Delimiter for composite keys ({entity}:{field}:{value})
CACHE_KEY_SEP = ":"
# Delimiter between parent id and child entity ({parent}:{parentId}-{entity})
CACHE_PARENT_SEP = "-"
# Prefix for by-id keys (id:{id}-{entity})
CACHE_PREFIX_ID = "id"

# Soft-delete flag shared by soft-deletable collections
ACTIVE_FIELD = "activo"

# Parent segments of {parent}:{parentId}-{entity} keys
PARENT_USER = "usuario"
PARENT_CLIENT = "cliente"
PARENT_COMPANY = "empresa"
PARENT_BUILDING = "edificio"
PARENT_PROVIDER = "proveedor"
PARENT_SPACE = "espacio"
PARENT_SERVICE = "servicio"
PARENT_RESERVATION = "reserva"
