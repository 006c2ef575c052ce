from karma import KarmaConfig, KarmaEngine
from karma.models import User
from karma.store import MemoryBackend

import logging

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
)

# --------------------------------
# Engine (swap MemoryBackend for KarmaEngine.create(redis_url=...) in production)
# --------------------------------

engine = KarmaEngine(
    MemoryBackend(),
    KarmaConfig(link_karma_threshold=None, cooldown=60, decay=True),
)

alice = User(id="U1", name="alice")
bob = User(id="U2", name="bob")

# --------------------------------
# Scoring
# --------------------------------

foo = engine.term("  Foo ")
print(foo.increment(alice).text)
print(foo.increment(alice).message.render(engine.translate))
print(foo.increment(bob).text)

bar = engine.term("bar")
bar.decrement(alice)

# --------------------------------
# Linking
# --------------------------------

print(engine.term("foo").link(engine.term("bar")))
print(engine.term("foo").check())

# --------------------------------
# Reporting
# --------------------------------

print("best:", engine.best_terms(3))
print("worst:", engine.worst_terms(3))
print("modified foo:", engine.term("foo").modified())

for action in engine.actions.entries():
    print(f"Action term={action.term} user={action.user_id} delta={action.delta:+d}")
