# agenda/utils/constants.py

# Mapeamento do dia da semana (date.weekday()) para o nome exibido.
# 0 = Segunda-feira, 6 = Domingo (mesmo índice usado na tabela schedules)
WEEKDAY_MAP = {
    0: "segunda",
    1: "terca",
    2: "quarta",
    3: "quinta",
    4: "sexta",
    5: "sabado",
    6: "domingo"
}

ALL_WEEKDAYS = frozenset(WEEKDAY_MAP)

# Status de agendamento
STATUS_PENDING = "pending"
STATUS_CONFIRMED = "confirmed"
STATUS_CANCELLED = "cancelled"

APPOINTMENT_STATUSES = (STATUS_PENDING, STATUS_CONFIRMED, STATUS_CANCELLED)

# Apenas estes status ocupam capacidade do horário
ACTIVE_STATUSES = frozenset({STATUS_PENDING, STATUS_CONFIRMED})

# Transições permitidas: cancelled é terminal
STATUS_TRANSITIONS = {
    STATUS_PENDING: frozenset({STATUS_CONFIRMED, STATUS_CANCELLED}),
    STATUS_CONFIRMED: frozenset({STATUS_CANCELLED}),
    STATUS_CANCELLED: frozenset(),
}

MINUTES_PER_DAY = 24 * 60

# Maior período (em dias, inclusive) aceito numa consulta de horários por intervalo
MAX_RANGE_DAYS = 90
