# DELAY AND SOUND TIMERS
# both count down toward zero at 60Hz, independently from the instructions being executed
# the elapsed time is accumulated in sixtieths of a millisecond so that a tick is exactly
# 1000 units and no fraction of a frame is ever lost between calls


TIMER_HZ = 60
TICK = 1000     # 1000/60 ms expressed in 1/60 ms


def update_time(machine, delta_ms):
    """advance the timers of machine by delta_ms milliseconds, return how many 60Hz ticks elapsed"""
    machine.timer_accumulator += delta_ms * TIMER_HZ
    ticks = 0
    while machine.timer_accumulator >= TICK:
        machine.timer_accumulator -= TICK
        ticks += 1
        if machine.dt > 0:
            machine.dt -= 1
        if machine.st > 0:
            machine.st -= 1
    # buzz while the sound timer is running, Fx18 may have changed it since the last call
    buzzing = machine.st > 0
    if buzzing != machine.speaker_on:
        machine.speaker_on = buzzing
        if machine.speaker:
            machine.speaker(buzzing)
    return ticks
