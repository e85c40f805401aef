"""
Management command to summarize the access log.

Ranks client IPs and user agents by request count and writes the report to
GIFSELECTOR_STATS_FILE.
"""
import re
from collections import Counter

from django.core.management.base import BaseCommand

from gallery.logs import timestamp
from gallery.service.config import get_log_file, get_stats_file

IP_PATTERN = re.compile(r'from (.*?) referer=')
UA_PATTERN = re.compile(r'ua=(.*)$')


def rank_access_log(lines):
    """
    Count requests per client IP and per user agent.

    Returns:
        tuple: (ip Counter, user agent Counter)
    """
    ip_counts = Counter()
    ua_counts = Counter()
    for line in lines:
        if not line.strip():
            continue
        ip_match = IP_PATTERN.search(line)
        if ip_match and ip_match.group(1).strip():
            ip_counts[ip_match.group(1).strip()] += 1
        ua_match = UA_PATTERN.search(line)
        if ua_match and ua_match.group(1).strip():
            ua_counts[ua_match.group(1).strip()] += 1
    return ip_counts, ua_counts


def format_report(ip_counts, ua_counts):
    lines = [f'Statistics generated at {timestamp()}', '', '=== IP Addresses Ranked ===']
    lines += [f'{ip}: {count}' for ip, count in ip_counts.most_common()]
    lines += ['', '=== Browser Agents Ranked ===']
    lines += [f'{ua}: {count}' for ua, count in ua_counts.most_common()]
    return '\n'.join(lines)


class Command(BaseCommand):
    help = 'Rank client IPs and user agents from the access log'

    def handle(self, *args, **options):
        log_file = get_log_file()
        if log_file is None:
            self.stdout.write(self.style.WARNING('File logging is disabled (GIFSELECTOR_ENABLE_FILE_LOGGING)'))
            return
        if not log_file.exists():
            self.stdout.write(self.style.WARNING(f'No access log at {log_file}'))
            return

        with open(log_file, 'r', encoding='utf-8') as f:
            ip_counts, ua_counts = rank_access_log(f)

        stats_file = get_stats_file()
        stats_file.parent.mkdir(parents=True, exist_ok=True)
        stats_file.write_text(format_report(ip_counts, ua_counts))

        self.stdout.write(self.style.SUCCESS(
            f'Wrote stats for {sum(ip_counts.values())} requests to {stats_file}'
        ))
