def make_cache_key(prefix: str, kind: str, ident: str) -> str:
    return f"{prefix}:{kind}:{ident}"
