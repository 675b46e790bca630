"""
View state collected by the controller for one rendered page
"""


class View:

    def __init__(self):
        self.title = ''
        self.message = ''
        self.params = {}
        self.cookies = []

    def set_title(self, title):
        self.title = title

    def set_message(self, message):
        self.message = message

    def set_view_param(self, name, value):
        self.params[name] = value

    def get_view_param(self, name, default=None):
        return self.params.get(name, default)

    def set_cookie(self, name, value, max_age, path='/'):
        self.cookies.append({'key': name, 'value': value, 'max_age': max_age, 'path': path})
