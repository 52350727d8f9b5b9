"""
Module containing the management command for streaming messages from a queue.
"""

import json
import time

from django.core.management.base import BaseCommand

from openstack_messaging.dto import StreamOptions
from openstack_messaging.settings import (
    client_id_from_settings,
    connection_from_settings,
    messaging_settings,
)


class Command(BaseCommand):
    """
    Management command that continuously streams the messages from a queue, writing
    each one to stdout as a line of JSON.
    """

    help = "Streams messages from a queue, writing each as a line of JSON."

    def add_arguments(self, parser):
        parser.add_argument("queue", help = "The name of the queue to stream.")
        parser.add_argument(
            "--limit",
            type = int,
            default = None,
            help = "The maximum number of messages to request per page."
        )
        parser.add_argument(
            "--echo",
            action = "store_true",
            help = "Include messages posted by this client."
        )
        parser.add_argument(
            "--include-claimed",
            action = "store_true",
            help = "Include messages that have been claimed."
        )
        parser.add_argument(
            "--once",
            action = "store_true",
            help = "Stop when the queue is drained instead of polling for more."
        )

    def write_message(self, message):
        self.stdout.write(
            json.dumps(
                {
                    "id": message.id,
                    "age": message.age,
                    "ttl": message.ttl,
                    "body": message.body,
                }
            )
        )

    def handle(self, *args, **options):
        connection = connection_from_settings()
        client_id = client_id_from_settings()
        messages = connection.messaging.messages(options["queue"])
        stream_options = StreamOptions(
            limit = options["limit"] or messaging_settings.DEFAULT_STREAM_LIMIT,
            echo = options["echo"],
            include_claimed = options["include_claimed"],
        )
        while True:
            page = messages.stream(client_id, stream_options)
            for message in page:
                self.write_message(message)
            # Continue from the end of this page if possible
            # The service does not return a next link for an empty page, so we keep
            # the current marker and poll again
            if page.next_options:
                stream_options = stream_options.merge(page.next_options)
            if page.is_empty:
                if options["once"]:
                    break
                time.sleep(messaging_settings.POLL_INTERVAL)
