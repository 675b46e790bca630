"""
Request parameter access for the wizard controller
"""
import re

# Form field names like "db[host]" are grouped into nested dicts
_GROUPED_NAME = re.compile(r'^(\w+)\[(\w*)\]$')


def group_fields(items):
    """Turn (name, value) pairs into a dict, nesting `group[key]` names."""
    result = {}
    for name, value in items:
        match = _GROUPED_NAME.match(name)
        if match:
            group, key = match.groups()
            bucket = result.setdefault(group, {})
            if isinstance(bucket, dict):
                bucket[key] = value
        else:
            result[name] = value
    return result


class RequestParams:
    """GET and POST values of one wizard request."""

    def __init__(self, get=None, post=None):
        self._get = dict(get or {})
        self._post = dict(post or {})

    @classmethod
    def from_flask(cls, request):
        return cls(
            get=group_fields(request.args.items()),
            post=group_fields(request.form.items()),
        )

    def get_request_var(self, name, source=None):
        """Return a request value from "get", "post", or either when no source is given."""
        if source == 'get':
            return self._get.get(name)
        if source == 'post':
            return self._post.get(name)
        if name in self._post:
            return self._post[name]
        return self._get.get(name)
