# backend/task_tracker/services/composer.py
from datetime import date
from html import escape


def compose_subject(project_title: str, days_remaining: int) -> str:
    if days_remaining == 0:
        return f"Deadline Reminder: {project_title} - Due today"
    day_word = "day" if days_remaining == 1 else "days"
    return f"Deadline Reminder: {project_title} - Due in {days_remaining} {day_word}"


def compose(project_title: str, client_name: str, deadline: date) -> str:
    """Build the HTML body of a deadline reminder"""
    return f"""\
<!DOCTYPE html>
<html>
  <head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Project Deadline Reminder</title>
  </head>
  <body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333; max-width: 600px; margin: 0 auto; padding: 20px;">
    <div style="background-color: #f4f4f4; padding: 20px; border-radius: 5px;">
      <h2 style="color: #2c3e50; margin-top: 0;">Project Deadline Reminder</h2>
      <p>This is a reminder that your project deadline is approaching.</p>
      <div style="background-color: white; padding: 15px; border-radius: 5px; margin: 20px 0;">
        <p><strong>Project:</strong> {escape(project_title)}</p>
        <p><strong>Client:</strong> {escape(client_name)}</p>
        <p><strong>Deadline:</strong> {deadline:%A, %d %B %Y}</p>
      </div>
      <p style="color: #e74c3c; font-weight: bold;">Please ensure all tasks are completed before the deadline.</p>
      <p style="margin-top: 30px; font-size: 12px; color: #7f8c8d;">
        This is an automated reminder from your Accounting Task Tracker.
      </p>
    </div>
  </body>
</html>
"""
