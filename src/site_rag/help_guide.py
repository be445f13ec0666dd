"""Built-in troubleshooting guide that is always part of the retrieval pool."""

HELP_DOC_ID = "troubleshooting-guide"
HELP_URL = "anycommand.io/help"
HELP_TITLE = "Any Command Troubleshooting Guide"

HELP_GUIDE = """
ANY COMMAND TROUBLESHOOTING GUIDE

Common Connection Issues and Solutions:

1. SAME WI-FI REQUIREMENT
   - Both your Android device and Windows PC must be on the same local network
   - Hotspots, mobile data, or hotel Wi-Fi can cause problems
   - Solution: Connect both devices to the same Wi-Fi network

2. LATEST VERSION
   - Always use the latest PC server from anycommand.io
   - Outdated versions may have connection issues
   - Solution: Download the latest version from anycommand.io

3. FIREWALL BLOCKING
   - Windows may ask for firewall permissions when first running the server
   - You must allow both private and public networks
   - Manual check: Control Panel > Windows Defender Firewall > Allow an app
   - Make sure pythonw.exe or Any Command server is allowed through
   - Solution: Allow the server through Windows Firewall

4. ADMINISTRATOR MODE
   - Running as Administrator can help eliminate issues
   - Right-click the server and choose "Run as administrator"
   - Not always necessary but helpful for troubleshooting

5. HOTEL WI-FI OR PUBLIC NETWORKS
   - Some networks isolate devices for security
   - Your phone won't see your PC even on the same Wi-Fi
   - Unfortunately, there's no workaround for restricted networks
   - Solution: Use a home or private Wi-Fi network, or create a mobile hotspot

6. RESTART BOTH DEVICES
   - Restart the app on your phone
   - Restart the server on your PC
   - Make sure you're using the latest version (check anycommand.io)
   - Double-check you entered the correct PIN and IP address
   - Join the community on Reddit if you need more help

COMMON QUESTIONS:

Q: Is this safe to use?
A: Yes. The app doesn't access your files or send data anywhere. It only works over your local network and requires a PIN to connect.

Q: Why does Windows say it's from an unknown source?
A: Until the app is signed with an official code signing certificate (in progress), Windows might show that message. You can safely run it by right-clicking and selecting "Run anyway".

Q: It doesn't connect, what's wrong?
A: Make sure your PC and phone are on the same Wi-Fi. Some networks (like hotel or office wifi) may block local connections. Try using a mobile hotspot or home network if possible.

COMMUNITY SUPPORT:
- Reddit: r/AnyCommand
- Patreon: patreon.com/c/anycommandremoteapp
- Buy Me a Coffee: buymeacoffee.com/anycommand8
"""
