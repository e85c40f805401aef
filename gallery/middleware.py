from gallery.logs import describe_request, write_log


class AccessLogMiddleware:
    """Log one access line per incoming request"""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        write_log(describe_request(request))
        return self.get_response(request)
