# Fx0A puts the machine in one of these two states:
# Running -> WaitingForKey(x) -> (key down) -> Running


class Running:
    """instructions are fetched and executed normally"""
    def __repr__(self):
        return "Running"

    def __eq__(self, other):
        return isinstance(other, Running)

    def __hash__(self):
        return hash(Running)


class WaitingForKey:
    """fetch is suspended until a key is down, its index will land in V[register]"""
    def __init__(self, register):
        self.register = register & 0xF

    def __repr__(self):
        return f"WaitingForKey(V{self.register:X})"

    def __eq__(self, other):
        return isinstance(other, WaitingForKey) and other.register == self.register

    def __hash__(self):
        return hash((WaitingForKey, self.register))


RUNNING = Running()
