"""
Terminal loot feed.

Usage:
    python manage.py watch_loot
    python manage.py watch_loot --url http://loot.example.com --category unique --push
    python manage.py watch_loot --once
"""
import threading

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from infrastructure.bootstrap import get_container
from infrastructure.event_bus import EventBus
from services.dashboard import CATEGORIES, DashboardState, LootFeedClient, LootPoller, LootSubscriber, render_text


class Command(BaseCommand):
    help = 'Print the loot feed grouped by character and keep it updated'

    def add_arguments(self, parser):
        parser.add_argument('--url', default=getattr(settings, 'DASHBOARD_API_URL', 'http://localhost:8000'),
                            help='Base URL of the loot API')
        parser.add_argument('--category', default='all', choices=CATEGORIES)
        parser.add_argument('--interval', type=float, default=getattr(settings, 'DASHBOARD_POLL_INTERVAL', 5),
                            help='Seconds between polls')
        parser.add_argument('--push', action='store_true',
                            help='Also listen on the broadcast channel for new drops')
        parser.add_argument('--once', action='store_true',
                            help='Fetch once, print and exit')

    def handle(self, *args, **options):
        state = DashboardState(category=options['category'])
        print_lock = threading.Lock()

        def redraw():
            with print_lock:
                self.stdout.write(render_text(state))
                self.stdout.write('')

        poller = LootPoller(
            LootFeedClient(options['url']),
            state,
            interval=options['interval'],
            on_update=redraw,
        )

        if options['once']:
            if not poller.run_once():
                raise CommandError(f"Could not fetch loot from {options['url']}")
            return

        subscriber = None
        if options['push']:
            subscriber = LootSubscriber(get_container().get(EventBus), state, on_update=redraw)
            subscriber.start()

        poller.start()
        stop = threading.Event()
        try:
            while not stop.wait(1.0):
                pass
        except KeyboardInterrupt:
            self.stdout.write('Stopping...')
        finally:
            poller.stop(timeout=5)
            if subscriber is not None:
                subscriber.stop(timeout=5)
