# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the DayPlanner project.
# Licensed under the MIT License - see the LICENSE file for details.


from .user import User
from .task import Task
from .task_history import HistoricalTask
from .user_preferences import UserPreferences
from .notification import NotificationAttempt
from .task_suggestion import TaskSuggestion
