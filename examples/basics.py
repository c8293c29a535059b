import logging

from storewatch import by_key, create_watcher

logging.basicConfig(level=logging.INFO, format="%(name)s: %(message)s")

# ------------------------------------------------------------------------------------------------
# A tiny redux-style container. storewatch only needs get_state, subscribe and dispatch.


class TodoStore:
    def __init__(self):
        self._state = {"user": {"id": 1, "name": "Alice"}, "todos": []}
        self._listeners = []

    def get_state(self):
        return self._state

    def subscribe(self, listener):
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def dispatch(self, action):
        # Change records dispatched by a watcher leave the state untouched
        if isinstance(action, dict):
            self._state = reduce(self._state, action)
        for listener in list(self._listeners):
            listener()


def reduce(state, action):
    if action["type"] == "add_todo":
        return {**state, "todos": state["todos"] + [action["title"]]}
    if action["type"] == "rename":
        return {**state, "user": {**state["user"], "name": action["name"]}}
    if action["type"] == "login":
        return {**state, "user": {"id": action["id"], "name": action["name"]}}
    return state


store = TodoStore()

print()
print("=" * 100)
print("Watching a path")
print("-" * 100)
print()

watcher = create_watcher(store)

# Paths are dotted strings; brackets index into lists.
watcher.watch(
    "todos[0]",
    lambda current, previous, state, old_state: print(f"First todo: {previous} -> {current}"),
)

store.dispatch({"type": "add_todo", "title": "write docs"})
store.dispatch({"type": "add_todo", "title": "ship it"})  # First todo unchanged: no output

print()
print("=" * 100)
print("Watching a selector")
print("-" * 100)
print()


@watcher.on(lambda state: len(state["todos"]), name="todoCount")
def on_count(current, previous, state, old_state):
    print(f"{current} todos (was {previous})")


store.dispatch({"type": "add_todo", "title": "celebrate"})

print()
print("=" * 100)
print("Custom equality")
print("-" * 100)
print()

# Only report a new user, not a renamed one.
watcher.watch(
    "user",
    lambda current, *args: print(f"Logged in as {current['name']}"),
    check_equal=by_key("id"),
)

store.dispatch({"type": "rename", "name": "Alicia"})  # Same id: no output
store.dispatch({"type": "login", "id": 2, "name": "Bob"})

print()
print("=" * 100)
print("Logging changes")
print("-" * 100)
print()

watcher.watch("user.name", lambda *args: None, should_log=True)
store.dispatch({"type": "rename", "name": "Robert"})

watcher.remove()
store.dispatch({"type": "add_todo", "title": "unwatched"})  # No output after remove()
