# flowlint/registry/builtin.py
# Bundled snapshot of common node descriptions (n8n node description format).
# A full registry export can be layered on top with --registry.

_HTTP_METHODS = [{"name": m, "value": m} for m in ("GET", "POST", "PUT", "PATCH", "DELETE", "HEAD")]

_COLLECTION = {"type": "collection", "default": {}, "options": []}


def _opts(*values):
    return [{"name": str(v), "value": v} for v in values]


BUILTIN_NODE_TYPES = [
    # ---------- Triggers ----------
    {
        "name": "n8n-nodes-base.manualTrigger",
        "displayName": "Manual Trigger",
        "group": ["trigger"],
        "version": 1,
        "inputs": [],
        "outputs": ["main"],
        "properties": [],
    },
    {
        "name": "n8n-nodes-base.scheduleTrigger",
        "displayName": "Schedule Trigger",
        "group": ["trigger", "schedule"],
        "version": [1, 1.1, 1.2],
        "inputs": [],
        "outputs": ["main"],
        "properties": [
            {"name": "rule", "type": "fixedCollection", "default": {"interval": [{}]}},
        ],
    },
    {
        "name": "n8n-nodes-base.webhook",
        "displayName": "Webhook",
        "group": ["trigger"],
        "version": [1, 1.1, 2],
        "inputs": [],
        "outputs": ["main"],
        "credentials": [
            {"name": "httpBasicAuth", "required": True,
             "displayOptions": {"show": {"authentication": ["basicAuth"]}}},
            {"name": "httpHeaderAuth", "required": True,
             "displayOptions": {"show": {"authentication": ["headerAuth"]}}},
        ],
        "properties": [
            {"name": "httpMethod", "type": "options", "default": "GET", "options": _HTTP_METHODS},
            {"name": "path", "type": "string", "default": "", "required": True},
            {"name": "authentication", "type": "options", "default": "none",
             "options": _opts("none", "basicAuth", "headerAuth")},
            {"name": "responseMode", "type": "options", "default": "onReceived",
             "options": _opts("onReceived", "lastNode", "responseNode")},
            {"name": "responseCode", "type": "number", "default": 200,
             "displayOptions": {"hide": {"responseMode": ["responseNode"]}}},
            dict(_COLLECTION, name="options"),
        ],
    },
    {
        "name": "@n8n/n8n-nodes-langchain.chatTrigger",
        "displayName": "Chat Trigger",
        "group": ["trigger"],
        "version": [1, 1.1],
        "inputs": [],
        "outputs": ["main"],
        "properties": [
            {"name": "public", "type": "boolean", "default": False},
            dict(_COLLECTION, name="options"),
        ],
    },
    # ---------- Core ----------
    {
        "name": "n8n-nodes-base.httpRequest",
        "displayName": "HTTP Request",
        "group": ["output"],
        "version": [4, 4.1, 4.2],
        "credentials": [
            {"name": "httpBasicAuth", "required": False},
            {"name": "httpHeaderAuth", "required": False},
            {"name": "oAuth2Api", "required": False},
        ],
        "properties": [
            {"name": "method", "type": "options", "default": "GET", "options": _HTTP_METHODS},
            {"name": "url", "type": "string", "default": "", "required": True},
            {"name": "authentication", "type": "options", "default": "none",
             "options": _opts("none", "genericCredentialType", "predefinedCredentialType")},
            {"name": "sendQuery", "type": "boolean", "default": False},
            {"name": "queryParameters", "type": "fixedCollection", "default": {},
             "displayOptions": {"show": {"sendQuery": [True]}}},
            {"name": "sendHeaders", "type": "boolean", "default": False},
            {"name": "headerParameters", "type": "fixedCollection", "default": {},
             "displayOptions": {"show": {"sendHeaders": [True]}}},
            {"name": "sendBody", "type": "boolean", "default": False},
            {"name": "contentType", "type": "options", "default": "json",
             "options": _opts("json", "form-urlencoded", "multipart-form-data", "raw"),
             "displayOptions": {"show": {"sendBody": [True]}}},
            {"name": "specifyBody", "type": "options", "default": "keypair",
             "options": _opts("keypair", "json"),
             "displayOptions": {"show": {"sendBody": [True], "contentType": ["json"]}}},
            {"name": "bodyParameters", "type": "fixedCollection", "default": {},
             "displayOptions": {"show": {"sendBody": [True], "specifyBody": ["keypair"]}}},
            {"name": "jsonBody", "type": "json", "default": "",
             "displayOptions": {"show": {"sendBody": [True], "specifyBody": ["json"]}}},
            dict(_COLLECTION, name="options"),
        ],
    },
    {
        "name": "n8n-nodes-base.set",
        "displayName": "Edit Fields (Set)",
        "group": ["input"],
        "version": [3, 3.1, 3.2, 3.3, 3.4],
        "properties": [
            {"name": "mode", "type": "options", "default": "manual", "options": _opts("manual", "raw")},
            {"name": "assignments", "type": "assignmentCollection", "default": {},
             "displayOptions": {"show": {"mode": ["manual"]}}},
            {"name": "jsonOutput", "type": "json", "default": "{}",
             "displayOptions": {"show": {"mode": ["raw"]}}},
            {"name": "includeOtherFields", "type": "boolean", "default": False},
            dict(_COLLECTION, name="options"),
        ],
    },
    {
        "name": "n8n-nodes-base.if",
        "displayName": "If",
        "group": ["transform"],
        "version": [2, 2.1, 2.2],
        "outputs": ["main", "main"],
        "properties": [
            {"name": "conditions", "type": "filter", "default": {}, "required": True},
            {"name": "looseTypeValidation", "type": "boolean", "default": False},
            dict(_COLLECTION, name="options"),
        ],
    },
    {
        "name": "n8n-nodes-base.merge",
        "displayName": "Merge",
        "group": ["transform"],
        "version": [3],
        "inputs": ["main", "main"],
        "properties": [
            {"name": "mode", "type": "options", "default": "append",
             "options": _opts("append", "combine", "combineBySql", "chooseBranch")},
            dict(_COLLECTION, name="options"),
        ],
    },
    {
        "name": "n8n-nodes-base.code",
        "displayName": "Code",
        "group": ["transform"],
        "version": [1, 2],
        "properties": [
            {"name": "mode", "type": "options", "default": "runOnceForAllItems",
             "options": _opts("runOnceForAllItems", "runOnceForEachItem")},
            {"name": "language", "type": "options", "default": "javaScript",
             "options": _opts("javaScript", "python")},
            {"name": "jsCode", "type": "string", "default": "",
             "displayOptions": {"show": {"language": ["javaScript"]}}},
            {"name": "pythonCode", "type": "string", "default": "",
             "displayOptions": {"show": {"language": ["python"]}}},
        ],
    },
    {
        "name": "n8n-nodes-base.noOp",
        "displayName": "No Operation, do nothing",
        "group": ["organization"],
        "version": 1,
        "properties": [],
    },
    {
        "name": "n8n-nodes-base.respondToWebhook",
        "displayName": "Respond to Webhook",
        "group": ["transform"],
        "version": [1, 1.1],
        "properties": [
            {"name": "respondWith", "type": "options", "default": "firstIncomingItem",
             "options": _opts("allIncomingItems", "firstIncomingItem", "json", "text", "noData", "redirect")},
            {"name": "responseBody", "type": "json", "default": "",
             "displayOptions": {"show": {"respondWith": ["json", "text"]}}},
            {"name": "redirectURL", "type": "string", "default": "", "required": True,
             "displayOptions": {"show": {"respondWith": ["redirect"]}}},
            dict(_COLLECTION, name="options"),
        ],
    },
    {
        "name": "n8n-nodes-base.emailSend",
        "displayName": "Send Email",
        "group": ["output"],
        "version": [2, 2.1],
        "credentials": [{"name": "smtp", "required": True}],
        "properties": [
            {"name": "fromEmail", "type": "string", "default": "", "required": True},
            {"name": "toEmail", "type": "string", "default": "", "required": True},
            {"name": "subject", "type": "string"},
            {"name": "emailFormat", "type": "options", "default": "text",
             "options": _opts("text", "html", "both")},
            {"name": "text", "type": "string", "default": "",
             "displayOptions": {"show": {"emailFormat": ["text", "both"]}}},
            {"name": "html", "type": "string", "default": "",
             "displayOptions": {"show": {"emailFormat": ["html", "both"]}}},
            dict(_COLLECTION, name="options"),
        ],
    },
    {
        "name": "n8n-nodes-base.slack",
        "displayName": "Slack",
        "group": ["output"],
        "version": [2, 2.1, 2.2],
        "credentials": [
            {"name": "slackApi", "required": True,
             "displayOptions": {"show": {"authentication": ["accessToken"]}}},
            {"name": "slackOAuth2Api", "required": True,
             "displayOptions": {"show": {"authentication": ["oAuth2"]}}},
        ],
        "properties": [
            {"name": "authentication", "type": "options", "default": "accessToken",
             "options": _opts("accessToken", "oAuth2")},
            {"name": "resource", "type": "options", "default": "message",
             "options": _opts("channel", "message", "user")},
            # message
            {"name": "operation", "type": "options", "default": "post",
             "options": _opts("post", "update", "delete", "search"),
             "displayOptions": {"show": {"resource": ["message"]}}},
            {"name": "select", "type": "options", "default": "",
             "options": _opts("channel", "user"), "required": True,
             "displayOptions": {"show": {"resource": ["message"], "operation": ["post"]}}},
            {"name": "channelId", "type": "resourceLocator", "default": {"mode": "list", "value": ""},
             "required": True,
             "displayOptions": {"show": {"resource": ["message"], "operation": ["post"], "select": ["channel"]}}},
            {"name": "user", "type": "resourceLocator", "default": {"mode": "list", "value": ""},
             "required": True,
             "displayOptions": {"show": {"resource": ["message"], "operation": ["post"], "select": ["user"]}}},
            {"name": "messageType", "type": "options", "default": "text",
             "options": _opts("text", "block", "attachment"),
             "displayOptions": {"show": {"resource": ["message"], "operation": ["post"]}}},
            {"name": "text", "type": "string", "default": "", "required": True,
             "displayOptions": {"show": {"resource": ["message"], "operation": ["post"], "messageType": ["text"]}}},
            {"name": "blocksUi", "type": "json", "default": "",
             "displayOptions": {"show": {"resource": ["message"], "operation": ["post"], "messageType": ["block"]}}},
            {"name": "as_user", "type": "boolean", "default": False, "deprecated": True,
             "displayOptions": {"show": {"resource": ["message"], "operation": ["post"]}}},
            {"name": "ts", "type": "string", "default": "", "required": True,
             "displayOptions": {"show": {"resource": ["message"], "operation": ["update", "delete"]}}},
            {"name": "query", "type": "string", "default": "", "required": True,
             "displayOptions": {"show": {"resource": ["message"], "operation": ["search"]}}},
            dict(_COLLECTION, name="otherOptions",
                 displayOptions={"show": {"resource": ["message"], "operation": ["post"]}}),
            # channel
            {"name": "operation", "type": "options", "default": "create",
             "options": _opts("create", "archive", "history"),
             "displayOptions": {"show": {"resource": ["channel"]}}},
            {"name": "channelId", "type": "string", "default": "", "required": True,
             "displayOptions": {"show": {"resource": ["channel"], "operation": ["create"]}}},
            {"name": "channelId", "type": "resourceLocator", "default": {"mode": "list", "value": ""},
             "required": True,
             "displayOptions": {"show": {"resource": ["channel"], "operation": ["archive", "history"]}}},
            # user
            {"name": "operation", "type": "options", "default": "info",
             "options": _opts("info", "getPresence"),
             "displayOptions": {"show": {"resource": ["user"]}}},
            {"name": "user", "type": "resourceLocator", "default": {"mode": "list", "value": ""},
             "required": True,
             "displayOptions": {"show": {"resource": ["user"]}}},
        ],
    },
    {
        "name": "n8n-nodes-base.splitInBatches",
        "displayName": "Loop Over Items",
        "group": ["organization"],
        "version": [3],
        # output 0 is "done", output 1 feeds the loop body
        "outputs": ["main", "main"],
        "properties": [
            {"name": "batchSize", "type": "number", "default": 1},
            dict(_COLLECTION, name="options"),
        ],
    },
    {
        "name": "n8n-nodes-base.stickyNote",
        "displayName": "Sticky Note",
        "group": ["input"],
        "version": 1,
        "inputs": [],
        "outputs": [],
        "properties": [
            {"name": "content", "type": "string", "default": ""},
            {"name": "height", "type": "number", "default": 160},
            {"name": "width", "type": "number", "default": 240},
            {"name": "color", "type": "number", "default": 1},
        ],
    },
    # ---------- AI (LangChain) ----------
    {
        "name": "@n8n/n8n-nodes-langchain.agent",
        "displayName": "AI Agent",
        "group": ["transform"],
        "version": [1.6, 1.7, 1.8],
        "inputs": [
            "main",
            {"type": "ai_languageModel", "required": True, "maxConnections": 1},
            {"type": "ai_memory", "maxConnections": 1},
            {"type": "ai_tool"},
            {"type": "ai_outputParser", "maxConnections": 1},
        ],
        "outputs": ["main"],
        "properties": [
            {"name": "promptType", "type": "options", "default": "auto", "options": _opts("auto", "define")},
            {"name": "text", "type": "string", "default": "", "required": True,
             "displayOptions": {"show": {"promptType": ["define"]}}},
            {"name": "hasOutputParser", "type": "boolean", "default": False},
            dict(_COLLECTION, name="options"),
        ],
    },
    {
        "name": "@n8n/n8n-nodes-langchain.chainLlm",
        "displayName": "Basic LLM Chain",
        "group": ["transform"],
        "version": [1.4, 1.5],
        "inputs": [
            "main",
            {"type": "ai_languageModel", "required": True, "maxConnections": 1},
            {"type": "ai_outputParser", "maxConnections": 1},
        ],
        "outputs": ["main"],
        "properties": [
            {"name": "promptType", "type": "options", "default": "auto", "options": _opts("auto", "define")},
            {"name": "text", "type": "string", "default": "", "required": True,
             "displayOptions": {"show": {"promptType": ["define"]}}},
            {"name": "hasOutputParser", "type": "boolean", "default": False},
        ],
    },
    {
        "name": "@n8n/n8n-nodes-langchain.lmChatOpenAi",
        "displayName": "OpenAI Chat Model",
        "group": ["transform"],
        "version": [1, 1.1, 1.2],
        "inputs": [],
        "outputs": ["ai_languageModel"],
        "credentials": [{"name": "openAiApi", "required": True}],
        "properties": [
            {"name": "model", "type": "options", "default": "gpt-4o-mini",
             "options": _opts("gpt-4o-mini", "gpt-4o", "gpt-4.1", "gpt-4.1-mini", "o3-mini")},
            dict(_COLLECTION, name="options"),
        ],
    },
    {
        "name": "@n8n/n8n-nodes-langchain.memoryBufferWindow",
        "displayName": "Window Buffer Memory",
        "group": ["transform"],
        "version": [1, 1.1, 1.2, 1.3],
        "inputs": [],
        "outputs": ["ai_memory"],
        "properties": [
            {"name": "sessionIdType", "type": "options", "default": "fromInput",
             "options": _opts("fromInput", "customKey")},
            {"name": "sessionKey", "type": "string", "default": "", "required": True,
             "displayOptions": {"show": {"sessionIdType": ["customKey"]}}},
            {"name": "contextWindowLength", "type": "number", "default": 5},
        ],
    },
    {
        "name": "@n8n/n8n-nodes-langchain.toolHttpRequest",
        "displayName": "HTTP Request Tool",
        "group": ["output"],
        "version": [1, 1.1],
        "inputs": [],
        "outputs": ["ai_tool"],
        "properties": [
            {"name": "toolDescription", "type": "string", "default": ""},
            {"name": "method", "type": "options", "default": "GET", "options": _HTTP_METHODS},
            {"name": "url", "type": "string", "default": "", "required": True},
        ],
    },
    {
        "name": "@n8n/n8n-nodes-langchain.toolCode",
        "displayName": "Code Tool",
        "group": ["transform"],
        "version": [1, 1.1],
        "inputs": [],
        "outputs": ["ai_tool"],
        "properties": [
            {"name": "name", "type": "string", "default": "", "required": True},
            {"name": "description", "type": "string", "default": "", "required": True},
            {"name": "jsCode", "type": "string", "default": ""},
        ],
    },
    {
        "name": "@n8n/n8n-nodes-langchain.outputParserStructured",
        "displayName": "Structured Output Parser",
        "group": ["transform"],
        "version": [1, 1.1, 1.2],
        "inputs": [],
        "outputs": ["ai_outputParser"],
        "properties": [
            {"name": "jsonSchemaExample", "type": "json", "default": ""},
        ],
    },
]
