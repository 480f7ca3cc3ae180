from __future__ import annotations

from fitapi.registry.model import (
    AuthRequirement,
    Exclusive,
    FlatTemplate,
    HttpMethod,
    MethodDescriptor,
    OneRequired,
    OptionalParams,
    OptionalSegments,
    ParameterRule,
    Required,
    RequiredIf,
    ResourceTemplate,
    VariantTemplate,
)


NONE = AuthRequirement.NONE
AUTH = AuthRequirement.REQUIRED
USER_ID = AuthRequirement.REQUIRED_UNLESS_USER_ID

ACCEPT_LANGUAGE = "Accept-Language"
ACCEPT_LOCALE = "Accept-Locale"
SUBSCRIBER_ID = "X-Fitbit-Subscriber-Id"


def _flat(*segments: str) -> FlatTemplate:
    return FlatTemplate(tuple(segments))


def _user(*segments: str) -> FlatTemplate:
    return FlatTemplate(("user", "-") + tuple(segments))


def _dated(*segments: str) -> VariantTemplate:
    # single day, rolling period ending on base-date, explicit range
    return VariantTemplate(
        variants=(
            ("range", _user(*segments, "date", "<base-date>", "<end-date>")),
            ("period", _user(*segments, "date", "<base-date>", "<period>")),
            ("date", _user(*segments, "date", "<date>")),
        )
    )


def _m(
    name: str,
    http_method: HttpMethod,
    auth: AuthRequirement,
    resources: ResourceTemplate,
    *rules: ParameterRule,
    headers: tuple[str, ...] = (),
    query: tuple[str, ...] = (),
    encodes_body: bool = True,
    description: str = "",
) -> MethodDescriptor:
    return MethodDescriptor(
        name=name,
        http_method=http_method,
        auth=auth,
        resources=resources,
        rules=tuple(rules),
        allowed_headers=headers,
        query_parameters=query,
        encodes_body=encodes_body,
        description=description,
    )


# ----------------------------
# Activities
# ----------------------------

_ACTIVITIES = (
    _m("api-browse-activities", "GET", NONE, _flat("activities"),
       headers=(ACCEPT_LOCALE,),
       description="Tree of all activity categories and activities"),
    _m("api-get-activity", "GET", NONE, _flat("activities", "<activity-id>"),
       headers=(ACCEPT_LOCALE,),
       description="Details of a single activity"),
    _m("api-get-activities", "GET", USER_ID, _user("activities", "date", "<date>"),
       headers=(ACCEPT_LANGUAGE,),
       description="Activity summary and logged activities for a day"),
    _m("api-get-activity-stats", "GET", USER_ID, _user("activities"),
       headers=(ACCEPT_LANGUAGE,),
       description="Lifetime and best activity statistics"),
    _m("api-get-activity-log-list", "GET", AUTH, _user("activities", "list"),
       Exclusive(("beforeDate", "afterDate")),
       Required(("sort", "limit", "offset")),
       query=("beforeDate", "afterDate", "sort", "limit", "offset"),
       headers=(ACCEPT_LANGUAGE,),
       description="Paged list of activity log entries"),
    _m("api-get-recent-activities", "GET", AUTH, _user("activities", "recent"),
       headers=(ACCEPT_LANGUAGE,),
       description="Recently logged activities"),
    _m("api-get-frequent-activities", "GET", AUTH, _user("activities", "frequent"),
       headers=(ACCEPT_LANGUAGE,),
       description="Frequently logged activities"),
    _m("api-get-favorite-activities", "GET", AUTH, _user("activities", "favorite"),
       headers=(ACCEPT_LANGUAGE,),
       description="Favorite activities"),
    _m("api-add-favorite-activity", "POST", AUTH, _user("activities", "favorite", "<activity-id>"),
       description="Add an activity to favorites"),
    _m("api-delete-favorite-activity", "DELETE", AUTH, _user("activities", "favorite", "<activity-id>"),
       description="Remove an activity from favorites"),
    _m("api-log-activity", "POST", AUTH, _user("activities"),
       Exclusive(("activityId", "activityName")),
       RequiredIf((("activityName", "manualCalories"),)),
       Required(("startTime", "durationMillis", "date")),
       OptionalParams(("distance", "distanceUnit")),
       headers=(ACCEPT_LANGUAGE, ACCEPT_LOCALE),
       description="Log an activity"),
    _m("api-delete-activity-log", "DELETE", AUTH, _user("activities", "<activity-log-id>"),
       description="Delete an activity log entry"),
    _m("api-get-activity-daily-goals", "GET", AUTH, _user("activities", "goals", "daily"),
       headers=(ACCEPT_LANGUAGE,),
       description="Daily activity goals"),
    _m("api-get-activity-weekly-goals", "GET", AUTH, _user("activities", "goals", "weekly"),
       headers=(ACCEPT_LANGUAGE,),
       description="Weekly activity goals"),
    _m("api-update-activity-daily-goals", "POST", AUTH, _user("activities", "goals", "daily"),
       OneRequired(("caloriesOut", "activeMinutes", "floors", "distance", "steps")),
       headers=(ACCEPT_LANGUAGE,),
       description="Update daily activity goals"),
    _m("api-update-activity-weekly-goals", "POST", AUTH, _user("activities", "goals", "weekly"),
       OneRequired(("steps", "distance", "floors")),
       headers=(ACCEPT_LANGUAGE,),
       description="Update weekly activity goals"),
)

# ----------------------------
# Time series
# ----------------------------

_TIME_SERIES = (
    _m("api-get-time-series", "GET", USER_ID,
       VariantTemplate(
           variants=(
               ("period", _user("<resource-path>", "date", "<date>", "<period>")),
               ("range", _user("<resource-path>", "date", "<base-date>", "<end-date>")),
           )
       ),
       Required(("resource-path",)),
       description="Time series for a resource path over a period or a date range"),
    _m("api-get-intraday-time-series", "GET", AUTH,
       VariantTemplate(
           variants=(
               ("range", _user("<resource-path>", "date", "<base-date>", "<end-date>", "<detail-level>")),
               ("date", _user("<resource-path>", "date", "<date>", "1d", "<detail-level>")),
           ),
           optional=(
               OptionalSegments(("start-time", "end-time"), ("time", "<start-time>", "<end-time>")),
           ),
       ),
       Required(("resource-path", "detail-level")),
       RequiredIf((("start-time", "end-time"), ("end-time", "start-time"))),
       description="Intraday time series, optionally limited to a time window"),
)

# ----------------------------
# Body and health metrics
# ----------------------------

_BODY = (
    _m("api-get-body-measurements", "GET", USER_ID, _user("body", "date", "<date>"),
       headers=(ACCEPT_LANGUAGE,),
       description="Body measurements for a day"),
    _m("api-log-body-measurements", "POST", AUTH, _user("body"),
       Required(("date",)),
       OneRequired(("bicep", "calf", "chest", "fat", "forearm", "hips", "neck", "thigh", "waist", "weight")),
       OptionalParams(("time",)),
       headers=(ACCEPT_LANGUAGE,),
       description="Log body measurements"),
    _m("api-get-body-weight", "GET", AUTH, _dated("body", "log", "weight"),
       headers=(ACCEPT_LANGUAGE,),
       description="Weight log entries for a day, period or range"),
    _m("api-log-body-weight", "POST", AUTH, _user("body", "log", "weight"),
       Required(("weight", "date")),
       OptionalParams(("time",)),
       headers=(ACCEPT_LANGUAGE,),
       description="Log a weight entry"),
    _m("api-delete-body-weight-log", "DELETE", AUTH, _user("body", "log", "weight", "<body-weight-log-id>"),
       description="Delete a weight log entry"),
    _m("api-get-body-fat", "GET", AUTH, _dated("body", "log", "fat"),
       description="Body fat log entries for a day, period or range"),
    _m("api-log-body-fat", "POST", AUTH, _user("body", "log", "fat"),
       Required(("fat", "date")),
       OptionalParams(("time",)),
       description="Log a body fat entry"),
    _m("api-delete-body-fat-log", "DELETE", AUTH, _user("body", "log", "fat", "<body-fat-log-id>"),
       description="Delete a body fat log entry"),
    _m("api-get-body-weight-goal", "GET", AUTH, _user("body", "log", "weight", "goal"),
       headers=(ACCEPT_LANGUAGE,),
       description="Weight goal"),
    _m("api-update-weight-goal", "POST", AUTH, _user("body", "log", "weight", "goal"),
       Required(("startDate", "startWeight")),
       OptionalParams(("weight",)),
       headers=(ACCEPT_LANGUAGE,),
       description="Update the weight goal"),
    _m("api-get-body-fat-goal", "GET", AUTH, _user("body", "log", "fat", "goal"),
       description="Body fat goal"),
    _m("api-update-fat-goal", "POST", AUTH, _user("body", "log", "fat", "goal"),
       Required(("fat",)),
       description="Update the body fat goal"),
    _m("api-get-blood-pressure", "GET", AUTH, _user("bp", "date", "<date>"),
       description="Blood pressure entries for a day"),
    _m("api-log-blood-pressure", "POST", AUTH, _user("bp"),
       Required(("systolic", "diastolic", "date")),
       OptionalParams(("time",)),
       description="Log a blood pressure entry"),
    _m("api-delete-blood-pressure-log", "DELETE", AUTH, _user("bp", "<bp-log-id>"),
       description="Delete a blood pressure entry"),
    _m("api-get-glucose", "GET", AUTH, _user("glucose", "date", "<date>"),
       headers=(ACCEPT_LANGUAGE,),
       description="Glucose entries for a day"),
    _m("api-log-glucose", "POST", AUTH, _user("glucose"),
       Required(("date",)),
       OneRequired(("hbac1c", "tracker")),
       RequiredIf((("tracker", "glucose"),)),
       OptionalParams(("time",)),
       headers=(ACCEPT_LANGUAGE,),
       description="Log a glucose entry"),
    _m("api-get-heart-rate", "GET", AUTH, _user("heart", "date", "<date>"),
       description="Heart rate entries for a day"),
    _m("api-log-heart-rate", "POST", AUTH, _user("heart"),
       Required(("tracker", "heartRate", "date")),
       OptionalParams(("time",)),
       description="Log a heart rate entry"),
    _m("api-delete-heart-rate-log", "DELETE", AUTH, _user("heart", "<heart-log-id>"),
       description="Delete a heart rate entry"),
)

# ----------------------------
# Foods and water
# ----------------------------

_FOODS = (
    _m("api-search-foods", "GET", NONE, _flat("foods", "search"),
       Required(("query",)),
       query=("query",),
       headers=(ACCEPT_LOCALE,),
       description="Search the food database"),
    _m("api-get-food", "GET", NONE, _flat("foods", "<food-id>"),
       headers=(ACCEPT_LOCALE,),
       description="Details of a single food"),
    _m("api-get-food-units", "GET", NONE, _flat("foods", "units"),
       description="All valid food measurement units"),
    _m("api-get-food-locales", "GET", NONE, _flat("foods", "locales"),
       description="Supported food database locales"),
    _m("api-create-food", "POST", AUTH, _flat("foods"),
       Required(("defaultFoodMeasurementUnitId", "defaultServingSize", "calories")),
       OptionalParams(("formType", "description")),
       headers=(ACCEPT_LOCALE,),
       description="Create a private food"),
    _m("api-delete-custom-food", "DELETE", AUTH, _user("foods", "<food-id>"),
       description="Delete a private food"),
    _m("api-get-food-logs", "GET", AUTH, _user("foods", "log", "date", "<date>"),
       headers=(ACCEPT_LOCALE, ACCEPT_LANGUAGE),
       description="Food log entries and nutrition summary for a day"),
    _m("api-log-food", "POST", AUTH, _user("foods", "log"),
       Exclusive(("foodId", "foodName")),
       RequiredIf((("foodName", "calories"),)),
       Required(("mealTypeId", "unitId", "amount", "date")),
       OptionalParams(("brandName", "favorite")),
       headers=(ACCEPT_LOCALE,),
       description="Log a food"),
    _m("api-delete-food-log", "DELETE", AUTH, _user("foods", "log", "<food-log-id>"),
       description="Delete a food log entry"),
    _m("api-get-recent-foods", "GET", AUTH, _user("foods", "log", "recent"),
       headers=(ACCEPT_LOCALE, ACCEPT_LANGUAGE),
       description="Recently logged foods"),
    _m("api-get-frequent-foods", "GET", AUTH, _user("foods", "log", "frequent"),
       headers=(ACCEPT_LOCALE, ACCEPT_LANGUAGE),
       description="Frequently logged foods"),
    _m("api-get-favorite-foods", "GET", AUTH, _user("foods", "log", "favorite"),
       headers=(ACCEPT_LOCALE, ACCEPT_LANGUAGE),
       description="Favorite foods"),
    _m("api-add-favorite-food", "POST", AUTH, _user("foods", "log", "favorite", "<food-id>"),
       description="Add a food to favorites"),
    _m("api-delete-favorite-food", "DELETE", AUTH, _user("foods", "log", "favorite", "<food-id>"),
       description="Remove a food from favorites"),
    _m("api-get-meals", "GET", AUTH, _user("meals"),
       description="Meals created by the user"),
    _m("api-get-food-goals", "GET", AUTH, _user("foods", "log", "goal"),
       description="Daily calorie consumption goal"),
    _m("api-update-food-goals", "POST", AUTH, _user("foods", "log", "goal"),
       Exclusive(("calories", "intensity")),
       RequiredIf((("intensity", "personalized"),)),
       headers=(ACCEPT_LOCALE, ACCEPT_LANGUAGE),
       description="Update the daily calorie consumption goal"),
    _m("api-get-water-logs", "GET", AUTH, _user("foods", "log", "water", "date", "<date>"),
       headers=(ACCEPT_LANGUAGE,),
       description="Water log entries for a day"),
    _m("api-log-water", "POST", AUTH, _user("foods", "log", "water"),
       Required(("amount", "date")),
       OptionalParams(("unit",)),
       headers=(ACCEPT_LANGUAGE,),
       description="Log water consumption"),
    _m("api-delete-water-log", "DELETE", AUTH, _user("foods", "log", "water", "<water-log-id>"),
       description="Delete a water log entry"),
    _m("api-get-water-goal", "GET", AUTH, _user("foods", "log", "water", "goal"),
       description="Daily water consumption goal"),
    _m("api-update-water-goal", "POST", AUTH, _user("foods", "log", "water", "goal"),
       Required(("target",)),
       description="Update the daily water consumption goal"),
)

# ----------------------------
# Sleep
# ----------------------------

_SLEEP = (
    _m("api-get-sleep", "GET", AUTH, _user("sleep", "date", "<date>"),
       description="Sleep log entries for a day"),
    _m("api-log-sleep", "POST", AUTH, _user("sleep"),
       Required(("startTime", "duration", "date")),
       description="Log a sleep entry"),
    _m("api-delete-sleep-log", "DELETE", AUTH, _user("sleep", "<sleep-log-id>"),
       description="Delete a sleep log entry"),
    _m("api-get-sleep-goal", "GET", AUTH, _user("sleep", "goal"),
       description="Sleep goal"),
    _m("api-update-sleep-goal", "POST", AUTH, _user("sleep", "goal"),
       Required(("minDuration",)),
       description="Update the sleep goal"),
)

# ----------------------------
# User profile, badges, devices
# ----------------------------

_USER = (
    _m("api-get-user-info", "GET", USER_ID, _user("profile"),
       headers=(ACCEPT_LANGUAGE,),
       description="User profile"),
    _m("api-update-user-info", "POST", AUTH, _user("profile"),
       OneRequired((
           "gender", "birthday", "height", "nickname", "aboutMe", "fullname",
           "country", "state", "city", "strideLengthWalking", "strideLengthRunning",
           "weightUnit", "heightUnit", "waterUnit", "glucoseUnit", "timezone",
           "foodsLocale", "locale", "localeLang", "localeCountry",
       )),
       headers=(ACCEPT_LANGUAGE,),
       description="Update the user profile"),
    _m("api-get-badges", "GET", USER_ID, _user("badges"),
       headers=(ACCEPT_LOCALE,),
       description="Badges earned by the user"),
    _m("api-get-devices", "GET", AUTH, _user("devices"),
       description="Devices paired with the account"),
    _m("api-get-device", "GET", AUTH, _user("devices", "<device-id>"),
       description="Details of a paired device"),
    _m("api-get-alarms", "GET", AUTH, _user("devices", "tracker", "<device-id>", "alarms"),
       description="Alarms set on a tracker"),
    _m("api-add-alarm", "POST", AUTH, _user("devices", "tracker", "<device-id>", "alarms"),
       Required(("time", "enabled", "recurring", "weekDays")),
       OptionalParams(("label", "snoozeLength", "snoozeCount", "vibe")),
       headers=(ACCEPT_LANGUAGE,),
       description="Add an alarm to a tracker"),
    _m("api-update-alarm", "POST", AUTH, _user("devices", "tracker", "<device-id>", "alarms", "<alarm-id>"),
       Required(("time", "enabled", "recurring", "weekDays", "snoozeLength", "snoozeCount")),
       OptionalParams(("label", "vibe")),
       headers=(ACCEPT_LANGUAGE,),
       description="Update a tracker alarm"),
    _m("api-delete-alarm", "DELETE", AUTH, _user("devices", "tracker", "<device-id>", "alarms", "<alarm-id>"),
       description="Delete a tracker alarm"),
)

# ----------------------------
# Friends
# ----------------------------

_FRIENDS = (
    _m("api-get-friends", "GET", USER_ID, _user("friends"),
       headers=(ACCEPT_LANGUAGE,),
       description="Friends of the user"),
    _m("api-get-friends-leaderboard", "GET", AUTH, _user("friends", "leaderboard"),
       headers=(ACCEPT_LANGUAGE,),
       description="Friends leaderboard"),
    _m("api-config-friends-leaderboard", "POST", AUTH, _user("friends", "leaderboard"),
       Required(("hideMeFromLeaderboard",)),
       headers=(ACCEPT_LANGUAGE,),
       description="Show or hide the user on the friends leaderboard"),
    _m("api-get-invites", "GET", AUTH, _user("friends", "invitations"),
       description="Pending friend invitations"),
    _m("api-create-invite", "POST", AUTH, _user("friends", "invitations"),
       Exclusive(("invitedUserEmail", "invitedUserId")),
       description="Invite a user to be a friend"),
    _m("api-accept-invite", "POST", AUTH, _user("friends", "invitations", "<from-user-id>"),
       Required(("accept",)),
       description="Accept or reject a friend invitation"),
)

# ----------------------------
# Subscriptions
# ----------------------------

_SUBSCRIPTIONS = (
    _m("api-get-subscriptions", "GET", AUTH, _user("<collection-path>", "apiSubscriptions"),
       headers=(SUBSCRIBER_ID,),
       description="Subscriptions for a collection, or for all collections"),
    _m("api-create-subscription", "POST", USER_ID,
       _user("<collection-path>", "apiSubscriptions", "<subscription-id>"),
       headers=(SUBSCRIBER_ID,),
       encodes_body=False,
       description="Subscribe to change notifications for a collection"),
    _m("api-delete-subscription", "DELETE", USER_ID,
       _user("<collection-path>", "apiSubscriptions", "<subscription-id>"),
       headers=(SUBSCRIBER_ID,),
       encodes_body=False,
       description="Remove a change notification subscription"),
)


METHOD_TABLE: tuple[MethodDescriptor, ...] = (
    _ACTIVITIES
    + _TIME_SERIES
    + _BODY
    + _FOODS
    + _SLEEP
    + _USER
    + _FRIENDS
    + _SUBSCRIPTIONS
)

# Older spellings still accepted by lookup: alias -> registered name.
METHOD_ALIASES: dict[str, str] = {
    "api-browse-activites": "api-browse-activities",
}
