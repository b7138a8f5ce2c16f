# working precision (bits) every escalation schedule starts from
DEFAULT_PRECISION = 53

# schedules double the precision until it would exceed this
MAX_PRECISION = 1 << 15

# extra bits carried while polishing an enclosure
GUARD_BITS = 16

NEWTON_STEPS = 64

REFINE_STEPS = 200

ADD, SUB, MUL, DIV = 'add', 'sub', 'mul', 'div'
