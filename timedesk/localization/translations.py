"""Translation tables for user-facing messages."""

TRANSLATIONS = {
    "en": {
        "errors.resource_not_found": "Resource not found",
        "errors.not_authenticated": "Not authenticated",
        "errors.permission_denied": "Permission denied",
        "errors.validation_error": "Validation error",
        "errors.resource_conflict": "Resource conflict",
        "errors.internal_error": "Internal server error",
        "errors.invalid_transition": "Cannot {action} a record that is {status}",
        "errors.task_not_found": "Task not found",
        "errors.record_not_found": "Time record not found",
        "errors.employee_not_found": "Employee not found",
        "errors.task_not_available": "Task is not available for work",
        "errors.task_already_active": "Task is already being tracked today",
        "errors.no_employee_profile": "Current user has no employee profile",
        "errors.calendar_range": "Date range must be between 1 and {days} days",
        "duration.hours_minutes": "{hours}h {minutes}m",
    },
    "ru": {
        "errors.resource_not_found": "Ресурс не найден",
        "errors.not_authenticated": "Требуется аутентификация",
        "errors.permission_denied": "Доступ запрещён",
        "errors.validation_error": "Ошибка валидации",
        "errors.resource_conflict": "Конфликт данных",
        "errors.internal_error": "Внутренняя ошибка сервера",
        "errors.invalid_transition": "Нельзя выполнить действие {action} для записи в статусе {status}",
        "errors.task_not_found": "Задача не найдена",
        "errors.record_not_found": "Запись времени не найдена",
        "errors.employee_not_found": "Сотрудник не найден",
        "errors.task_not_available": "Задача недоступна для работы",
        "errors.task_already_active": "Задача уже в работе сегодня",
        "errors.no_employee_profile": "У пользователя нет профиля сотрудника",
        "errors.calendar_range": "Диапазон дат должен быть от 1 до {days} дней",
        "duration.hours_minutes": "{hours}ч {minutes}м",
    },
}
