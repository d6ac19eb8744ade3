# agenda/utils/system_message.py
# =====================================================================================================
#                                   MENSAGENS EXIBIDAS AO CLIENTE
# =====================================================================================================
MESSAGES = {
    # Conflitos de reserva
    'SLOT_NOT_AVAILABLE': "Este horário não está mais disponível. Por favor, escolha outro.",
    'SLOT_FULL': "Este horário já está ocupado ({ocupados} de {capacidade} turnos reservados). Por favor, escolha outro.",
    'SERVICE_INACTIVE': "O serviço selecionado não está disponível no momento.",
    'SERVICE_OUT_OF_WINDOW': "O serviço selecionado não está disponível na data {data}.",
    'SERVICE_WEEKDAY_UNAVAILABLE': "O serviço selecionado não é oferecido na(o) {dia}.",
    'STORE_TEMPORARILY_CLOSED': "O negócio está temporariamente fechado. Não é possível fazer novas reservas.",
    'STORE_DAY_OFF': "O negócio não atende no dia {data}.",
    'STORE_CLOSED_WEEKDAY': "O negócio está fechado na(o) {dia}. Por favor, escolha outro dia.",
    'OUTSIDE_BUSINESS_HOURS': "O horário {hora} está fora do horário de atendimento de {dia}.",
    'SLOT_OFF_GRID': "O horário {hora} não está na grade de horários deste serviço. Escolha um dos horários disponíveis.",

    # Validações de entrada
    'VALIDATION_FORMAT_ERROR_DATE': "Data inválida: '{valor}'. Use o formato AAAA-MM-DD ou DD/MM/AAAA.",
    'VALIDATION_FORMAT_ERROR_TIME': "Hora inválida: '{valor}'. Use o formato HH:MM.",
    'VALIDATION_PAST_DATE': "Não é possível agendar para datas ou horários passados.",
    'VALIDATION_INVALID_DURATION': "A duração do serviço deve ser maior que zero.",
    'VALIDATION_INVALID_RANGE': "A data final ({fim}) não pode ser anterior à data inicial ({inicio}).",
    'VALIDATION_RANGE_TOO_LONG': "O período consultado ({inicio} a {fim}) excede o limite de {max_dias} dias.",
    'VALIDATION_INVALID_STATUS': "Status inválido: '{status}'.",
    'VALIDATION_STATUS_TRANSITION': "Não é possível alterar um turno de '{atual}' para '{novo}'.",
    'VALIDATION_CANCELLED_RESCHEDULE': "Não é possível reagendar um turno cancelado.",

    # Registros inexistentes (erro do chamador)
    'NOT_FOUND_STORE': "Loja {store_id} não encontrada.",
    'NOT_FOUND_SERVICE': "Serviço {service_id} não encontrado.",
    'NOT_FOUND_APPOINTMENT': "Turno {appointment_id} não encontrado.",
}
