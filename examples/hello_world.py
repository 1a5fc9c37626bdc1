"""
namespaced_map — Hello World

Many maps, one Redis.  Each map tags its keys with a token; maps that
share a token share entries.  Closing a map purges its keys unless it
was marked to persist.

Needs a Redis server on localhost:6379.
"""

from namespaced_map import MapConfig, NamespacedStoreMap


def main():
    # ──────────────────────────────────────
    #  1. Two maps, same logical keys
    # ──────────────────────────────────────
    print("=== Independent namespaces ===\n")

    with NamespacedStoreMap() as first, NamespacedStoreMap() as second:
        first.put("greeting", "hello")
        second.put("greeting", "bonjour")

        print(f"  {first.token}: {first.get('greeting')}")
        print(f"  {second.token}: {second.get('greeting')}")

    # ──────────────────────────────────────
    #  2. Reopen a map through its token
    # ──────────────────────────────────────
    print("\n=== Same token, same entries ===\n")

    with NamespacedStoreMap() as owner:
        owner.put_all({"one": "1", "two": "2"})

        reader = NamespacedStoreMap.from_instance(owner, persist=True)
        print(f"  reader sees: {sorted(reader.entry_set())}")

    print(f"  after owner closed: {reader.size()} entries")

    # ──────────────────────────────────────
    #  3. Persist across processes
    # ──────────────────────────────────────
    print("\n=== Persisted map ===\n")

    saved = NamespacedStoreMap(persist=True)
    saved.put("session", "42")
    saved.close()

    config = MapConfig(token=saved.token)
    print(f"  config to hand over: {config.model_dump_json()}")

    with NamespacedStoreMap.from_config(config) as reopened:
        print(f"  reopened session: {reopened.get('session')}")
    # reopened was ephemeral, so the namespace is gone now


if __name__ == "__main__":
    main()
