from __future__ import annotations

import asyncio

from randompic import scheduler as scheduler_module
from randompic.scheduler import RotationScheduler
from randompic.selection import SelectionState


def test_tick_publishes_selection():
    state = SelectionState()
    rotation = RotationScheduler(state, ["/mnt/photos/a.jpg"], 5)

    assert rotation.tick() == "/mnt/photos/a.jpg"
    assert state.get() == "/mnt/photos/a.jpg"


def test_tick_with_no_files_leaves_selection_unchanged(caplog):
    state = SelectionState("/mnt/photos/old.jpg")
    rotation = RotationScheduler(state, [], 5)

    assert rotation.tick() is None
    assert state.get() == "/mnt/photos/old.jpg"
    assert "no image to display" in caplog.text


def test_interval_has_a_floor_of_one_second():
    assert RotationScheduler(SelectionState(), [], 0).interval == 1
    assert RotationScheduler(SelectionState(), [], 30).interval == 30


def test_start_publishes_single_element_after_first_tick():
    state = SelectionState()
    rotation = RotationScheduler(state, ["/mnt/photos/only.jpg"], 60)

    async def scenario():
        assert not rotation.running
        rotation.start()
        assert rotation.running
        assert state.get() == "/mnt/photos/only.jpg"
        await rotation.stop()

    asyncio.run(scenario())
    assert not rotation.running
    assert state.get() == "/mnt/photos/only.jpg"


def test_start_is_idempotent():
    state = SelectionState()
    ticks = []

    class CountingScheduler(RotationScheduler):
        def tick(self):
            ticks.append(1)
            return super().tick()

    rotation = CountingScheduler(state, ["/a.jpg"], 60)

    async def scenario():
        rotation.start()
        rotation.start()
        await rotation.stop()

    asyncio.run(scenario())
    assert len(ticks) == 1


def test_loop_keeps_ticking(monkeypatch):
    monkeypatch.setattr(scheduler_module, "MIN_DISPLAY_SECONDS", 0)
    state = SelectionState()
    ticks = []

    class CountingScheduler(RotationScheduler):
        def tick(self):
            ticks.append(1)
            return super().tick()

    rotation = CountingScheduler(state, ["/a.jpg", "/b.jpg"], 0)

    async def scenario():
        rotation.start()
        await asyncio.sleep(0.05)
        await rotation.stop()

    asyncio.run(scenario())
    assert len(ticks) > 2
    assert state.get() in ("/a.jpg", "/b.jpg")
