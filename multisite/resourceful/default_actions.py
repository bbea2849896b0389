"""
Default implementations of the resourceful actions.

``Builder.apply`` copies the enabled ones onto the controller class, so each
function here runs as a bound method of the controller handling the request.
"""


def index(self):
    self.load_objects()
    self.before("index")
    return self.response_for("index")


def show(self):
    self.load_object()
    self.before("show")
    return self.response_for("show")


def new(self):
    self.build_object()
    self.before("new")
    return self.response_for("new")


def create(self):
    self.build_object()
    self.before("create")
    if self.save_object():
        self.after("create")
        return self.response_for("create")
    self.after("create_fails")
    return self.response_for("create_fails")


def edit(self):
    self.load_object()
    self.before("edit")
    return self.response_for("edit")


def update(self):
    self.load_object()
    self.before("update")
    if self.update_object():
        self.after("update")
        return self.response_for("update")
    self.after("update_fails")
    return self.response_for("update_fails")


def destroy(self):
    self.load_object()
    self.before("destroy")
    if self.destroy_object():
        self.after("destroy")
        return self.response_for("destroy")
    self.after("destroy_fails")
    return self.response_for("destroy_fails")
