"""Infrastructure adapters: Firestore store, Redis cache, repositories, security."""
