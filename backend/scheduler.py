from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger
from tasks.eod_tasks import run_stock_alerts
from utils.dates import APP_TIMEZONE

scheduler = BackgroundScheduler()

# Schedule to run every day at 11:00 PM store time
scheduler.add_job(run_stock_alerts, CronTrigger(hour=23, minute=0, timezone=APP_TIMEZONE), id='stock_alerts_job')
